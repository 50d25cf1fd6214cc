"""Registry of known codecs, keyed by code."""

from __future__ import annotations

from typing import Optional

from .codecs import CimCodec, register_cim_json_codecs, register_ipld_codecs
from .errors import InvalidCodecRangeError

CUSTOM_CODEC_RANGE = range(0x300000, 0x400000)


class CodecRegistry:
    """Holds custom codecs (range-checked) and standard IPLD codecs."""

    def __init__(self) -> None:
        self._codecs: dict[int, CimCodec] = {}
        self._standard_codecs: dict[int, CimCodec] = {}
        register_ipld_codecs(self)
        register_cim_json_codecs(self)

    def register(self, codec: CimCodec) -> None:
        """Register a custom codec; its code must lie in 0x300000-0x3fffff."""
        code = int(codec.code)
        if code not in CUSTOM_CODEC_RANGE:
            raise InvalidCodecRangeError(code)
        self._codecs[code] = codec

    def register_standard(self, codec: CimCodec) -> None:
        """Register a standard IPLD codec without a range check."""
        self._standard_codecs[int(codec.code)] = codec

    def get(self, code: int) -> Optional[CimCodec]:
        """The codec registered under ``code``, custom codecs first."""
        code = int(code)
        codec = self._codecs.get(code)
        if codec is None:
            codec = self._standard_codecs.get(code)
        return codec

    def contains(self, code: int) -> bool:
        code = int(code)
        return code in self._codecs or code in self._standard_codecs

    def codes(self) -> list[int]:
        """All registered codes, sorted and without duplicates."""
        return sorted(set(self._codecs) | set(self._standard_codecs))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, int) and self.contains(code)

    def __len__(self) -> int:
        return len(self.codes())