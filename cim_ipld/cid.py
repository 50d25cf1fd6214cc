"""Multihashes and content identifiers (CIDs)."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from .blake3 import blake3
from .errors import InvalidCidError, MultihashError

BLAKE3_256 = 0x1E
SHA2_256 = 0x12
DAG_PB = 0x70

_MAX_DIGEST_SIZE = 64
_MAX_VARINT_BYTES = 10
_U64_MAX = (1 << 64) - 1
_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE32_ALPHABET = frozenset("abcdefghijklmnopqrstuvwxyz234567")


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned LEB128 varint."""
    if value < 0 or value > _U64_MAX:
        raise ValueError(f"varint out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes) -> tuple[int, int]:
    """Decode a varint from the start of `data`; return (value, bytes used)."""
    value = 0
    for index, byte in enumerate(data):
        if index >= _MAX_VARINT_BYTES:
            break
        value |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            if value > _U64_MAX:
                raise ValueError("varint overflows 64 bits")
            return value, index + 1
    if len(data) >= _MAX_VARINT_BYTES:
        raise ValueError("varint overflows 64 bits")
    raise ValueError("truncated varint")


def _base58_encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    chars = []
    while number:
        number, rem = divmod(number, 58)
        chars.append(_BASE58_ALPHABET[rem])
    zeros = len(data) - len(data.lstrip(b"\0"))
    return "1" * zeros + "".join(reversed(chars))


def _base58_decode(text: str) -> bytes:
    number = 0
    for char in text:
        digit = _BASE58_ALPHABET.find(char)
        if digit < 0:
            raise InvalidCidError(f"invalid base58 character {char!r}")
        number = number * 58 + digit
    zeros = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\0" * zeros + body


def _base32_decode(body: str) -> bytes:
    if not set(body) <= _BASE32_ALPHABET:
        raise InvalidCidError("invalid base32 character")
    try:
        return base64.b32decode(body.upper() + "=" * (-len(body) % 8))
    except binascii.Error as exc:
        raise InvalidCidError(f"invalid base32 data: {exc}") from exc


@dataclass(frozen=True)
class Multihash:
    """A hash digest tagged with the code of the hash function."""

    code: int
    digest: bytes

    def __post_init__(self) -> None:
        if self.code < 0:
            raise MultihashError(f"negative hash code {self.code}")
        if len(self.digest) > _MAX_DIGEST_SIZE:
            raise MultihashError(
                f"digest of {len(self.digest)} bytes exceeds {_MAX_DIGEST_SIZE}"
            )

    @property
    def size(self) -> int:
        return len(self.digest)

    def to_bytes(self) -> bytes:
        return encode_varint(self.code) + encode_varint(self.size) + bytes(self.digest)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Multihash":
        data = bytes(data)
        try:
            code, used = decode_varint(data)
            size, used_size = decode_varint(data[used:])
        except ValueError as exc:
            raise MultihashError(str(exc)) from exc
        rest = data[used + used_size:]
        if size > _MAX_DIGEST_SIZE:
            raise MultihashError(f"digest size {size} exceeds {_MAX_DIGEST_SIZE}")
        if len(rest) < size:
            raise MultihashError("multihash digest is truncated")
        if len(rest) > size:
            raise MultihashError("trailing bytes after multihash")
        return cls(code, rest)


@dataclass(frozen=True)
class Cid:
    """A content identifier, version 0 or 1."""

    version: int
    codec: int
    multihash: Multihash

    def __post_init__(self) -> None:
        if self.version not in (0, 1):
            raise InvalidCidError(f"unsupported CID version {self.version}")
        if self.version == 0 and (
            self.codec != DAG_PB
            or self.multihash.code != SHA2_256
            or self.multihash.size != 32
        ):
            raise InvalidCidError("CIDv0 must be a dag-pb sha2-256 identifier")

    @classmethod
    def new_v1(cls, codec: int, multihash: Multihash) -> "Cid":
        return cls(1, codec, multihash)

    def to_bytes(self) -> bytes:
        if self.version == 0:
            return self.multihash.to_bytes()
        return encode_varint(1) + encode_varint(self.codec) + self.multihash.to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Cid":
        data = bytes(data)
        if len(data) == 34 and data[:2] == b"\x12\x20":
            return cls(0, DAG_PB, Multihash(SHA2_256, data[2:]))
        try:
            version, used = decode_varint(data)
            if version != 1:
                raise InvalidCidError(f"unsupported CID version {version}")
            codec, used_codec = decode_varint(data[used:])
        except ValueError as exc:
            if isinstance(exc, InvalidCidError):
                raise
            raise InvalidCidError(str(exc)) from exc
        try:
            multihash = Multihash.from_bytes(data[used + used_codec:])
        except MultihashError as exc:
            raise InvalidCidError(str(exc)) from exc
        return cls(1, codec, multihash)

    @classmethod
    def parse(cls, text: str) -> "Cid":
        """Parse a CID from its multibase text form."""
        if not text:
            raise InvalidCidError("empty CID string")
        if len(text) == 46 and text.startswith("Qm"):
            return cls.from_bytes(_base58_decode(text))
        prefix, body = text[0], text[1:]
        if prefix == "b":
            raw = _base32_decode(body)
        elif prefix == "B":
            raw = _base32_decode(body.lower())
        elif prefix == "z":
            raw = _base58_decode(body)
        elif prefix in "fF":
            try:
                raw = bytes.fromhex(body)
            except ValueError as exc:
                raise InvalidCidError(f"invalid base16 data: {exc}") from exc
        else:
            raise InvalidCidError(f"unsupported multibase prefix {prefix!r}")
        cid = cls.from_bytes(raw)
        if cid.version == 0:
            raise InvalidCidError("CIDv0 must not carry a multibase prefix")
        return cid

    def __str__(self) -> str:
        raw = self.to_bytes()
        if self.version == 0:
            return _base58_encode(raw)
        return "b" + base64.b32encode(raw).decode("ascii").lower().rstrip("=")


def blake3_cid(payload: bytes, codec: int) -> Cid:
    """Return the CIDv1 of `payload` hashed with BLAKE3-256 under `codec`."""
    return Cid.new_v1(codec, Multihash(BLAKE3_256, blake3(payload)))