import pytest

from cim_ipld.codecs import CimCodec
from cim_ipld.errors import InvalidCodecRangeError
from cim_ipld.registry import CodecRegistry


class _TestCodec(CimCodec):
    def __init__(self, code, name):
        super().__init__(code, name)


def test_codec_range_validation():
    registry = CodecRegistry()
    for code in (0x300000, 0x300200, 0x3FFFFF):
        registry.register(_TestCodec(code, f"codec-{code:x}"))
        assert registry.get(code).code == code
    for code in (0x2FFFFF, 0x400000, 0x55, 0x71):
        with pytest.raises(InvalidCodecRangeError) as info:
            registry.register(_TestCodec(code, "bad"))
        assert info.value.code == code


def test_custom_codec_registration():
    registry = CodecRegistry()
    event_codec = _TestCodec(0x300200, "custom-event")
    registry.register(event_codec)

    retrieved = registry.get(0x300200)
    assert retrieved.name == "custom-event"
    assert retrieved.code == 0x300200

    registry.register(event_codec)
    assert registry.get(0x300200) is event_codec


def test_duplicate_registration_overwrites():
    registry = CodecRegistry()
    registry.register(_TestCodec(0x300200, "first"))
    registry.register(_TestCodec(0x300200, "second"))
    assert registry.get(0x300200).name == "second"
    assert registry.codes().count(0x300200) == 1


def test_codec_error_handling():
    registry = CodecRegistry()
    with pytest.raises(InvalidCodecRangeError):
        registry.register(_TestCodec(0x100000, "invalid"))
    assert registry.get(0x999999) is None
    assert not registry.contains(0x100000)


def test_codec_registry_operations():
    registry = CodecRegistry()
    registry.register(_TestCodec(0x300100, "test-codec-1"))
    registry.register(_TestCodec(0x300101, "test-codec-2"))

    assert registry.contains(0x300100)
    assert registry.contains(0x300101)
    assert not registry.contains(0x300102)

    codes = registry.codes()
    assert 0x300100 in codes
    assert 0x300101 in codes
    assert codes == sorted(set(codes))


def test_base_codecs_are_registered():
    registry = CodecRegistry()
    assert registry.get(0x71).name == "dag-cbor"
    assert registry.get(0x0129).name == "dag-json"
    assert registry.get(0x55).name == "raw"
    assert registry.get(0x340000).name == "cim-alchemist-json"
    assert registry.get(0x340005).name == "cim-event-stream-json"
    assert len(registry) == 13


def test_standard_registration_skips_range_check():
    registry = CodecRegistry()
    registry.register_standard(_TestCodec(0x90, "eth-block"))
    assert registry.get(0x90).name == "eth-block"
    assert 0x90 in registry
    assert "0x90" not in registry


def test_custom_codec_takes_precedence_over_standard():
    registry = CodecRegistry()
    registry.register_standard(_TestCodec(0x300300, "standard"))
    registry.register(_TestCodec(0x300300, "custom"))
    assert registry.get(0x300300).name == "custom"
    assert registry.codes().count(0x300300) == 1