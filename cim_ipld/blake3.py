"""BLAKE3 hash function with extendable output."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)
_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3
_BLOCK_LEN = 64
_CHUNK_LEN = 1024
_DEFAULT_LENGTH = 32

_MIXES = (
    (0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15),
    (0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14),
)


def _build_schedule() -> tuple:
    rounds = []
    order = list(range(16))
    for _ in range(7):
        rounds.append(
            tuple(
                (a, b, c, d, order[2 * i], order[2 * i + 1])
                for i, (a, b, c, d) in enumerate(_MIXES)
            )
        )
        order = [order[p] for p in _PERMUTATION]
    return tuple(rounds)


_SCHEDULE = _build_schedule()


def _words(block: bytes) -> tuple:
    return struct.unpack("<16I", block)


def _compress(cv, block_words, counter: int, block_len: int, flags: int) -> list:
    s = [*cv, *_IV[:4], counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    m = block_words
    for rnd in _SCHEDULE:
        for a, b, c, d, x, y in rnd:
            sa = (s[a] + s[b] + m[x]) & _MASK
            sd = s[d] ^ sa
            sd = ((sd >> 16) | (sd << 16)) & _MASK
            sc = (s[c] + sd) & _MASK
            sb = s[b] ^ sc
            sb = ((sb >> 12) | (sb << 20)) & _MASK
            sa = (sa + sb + m[y]) & _MASK
            sd ^= sa
            sd = ((sd >> 8) | (sd << 24)) & _MASK
            sc = (sc + sd) & _MASK
            sb ^= sc
            sb = ((sb >> 7) | (sb << 25)) & _MASK
            s[a], s[b], s[c], s[d] = sa, sb, sc, sd
    low, high = s[:8], s[8:]
    return [x ^ y for x, y in zip(low, high)] + [x ^ y for x, y in zip(high, cv)]


class _Output:
    __slots__ = ("input_cv", "block_words", "counter", "block_len", "flags")

    def __init__(self, input_cv, block_words, counter, block_len, flags) -> None:
        self.input_cv = input_cv
        self.block_words = block_words
        self.counter = counter
        self.block_len = block_len
        self.flags = flags

    def chaining_value(self) -> list:
        return _compress(
            self.input_cv, self.block_words, self.counter, self.block_len, self.flags
        )[:8]

    def root_bytes(self, length: int) -> bytes:
        out = bytearray()
        counter = 0
        while len(out) < length:
            words = _compress(
                self.input_cv, self.block_words, counter, self.block_len,
                self.flags | _ROOT,
            )
            out += struct.pack("<16I", *words)
            counter += 1
        return bytes(out[:length])


def _parent_output(left, right) -> _Output:
    return _Output(_IV, (*left, *right), 0, _BLOCK_LEN, _PARENT)


class _ChunkState:
    def __init__(self, key, chunk_counter: int) -> None:
        self.cv = list(key)
        self.chunk_counter = chunk_counter
        self.block = bytearray()
        self.blocks_compressed = 0

    def __len__(self) -> int:
        return _BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == _BLOCK_LEN:
                self.cv = _compress(
                    self.cv, _words(self.block), self.chunk_counter,
                    _BLOCK_LEN, self._start_flag(),
                )[:8]
                self.blocks_compressed += 1
                self.block = bytearray()
            take = min(_BLOCK_LEN - len(self.block), len(data))
            self.block += data[:take]
            data = data[take:]

    def output(self) -> _Output:
        padded = bytes(self.block).ljust(_BLOCK_LEN, b"\0")
        return _Output(
            list(self.cv), _words(padded), self.chunk_counter, len(self.block),
            self._start_flag() | _CHUNK_END,
        )


class Blake3:
    """Incremental BLAKE3 hasher in its unkeyed hashing mode."""

    def __init__(self, data: bytes = b"") -> None:
        self._chunk = _ChunkState(_IV, 0)
        self._stack: list = []
        if data:
            self.update(data)

    def _push_chunk_cv(self, new_cv, total_chunks: int) -> None:
        while total_chunks & 1 == 0:
            new_cv = _parent_output(self._stack.pop(), new_cv).chaining_value()
            total_chunks >>= 1
        self._stack.append(new_cv)

    def update(self, data) -> None:
        """Feed more bytes into the hash."""
        view = memoryview(data).cast("B")
        while view:
            if len(self._chunk) == _CHUNK_LEN:
                cv = self._chunk.output().chaining_value()
                total_chunks = self._chunk.chunk_counter + 1
                self._push_chunk_cv(cv, total_chunks)
                self._chunk = _ChunkState(_IV, total_chunks)
            take = min(_CHUNK_LEN - len(self._chunk), len(view))
            self._chunk.update(view[:take])
            view = view[take:]

    def digest(self, length: int = _DEFAULT_LENGTH) -> bytes:
        """Return `length` output bytes without altering the hasher state."""
        if length < 0:
            raise ValueError("digest length must not be negative")
        output = self._chunk.output()
        for cv in reversed(self._stack):
            output = _parent_output(cv, output.chaining_value())
        return output.root_bytes(length)

    def hexdigest(self, length: int = _DEFAULT_LENGTH) -> str:
        """Return the digest as lower-case hex."""
        return self.digest(length).hex()


def blake3(data) -> bytes:
    """Return the 32-byte BLAKE3 digest of `data`."""
    return Blake3(data).digest()