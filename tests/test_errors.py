import pytest

from cim_ipld.errors import (
    CborError,
    ChainValidationError,
    InvalidCidError,
    InvalidCodecRangeError,
    IpldError,
    MultihashError,
    SequenceValidationError,
    SerializationError,
)


def test_chain_validation_error_keeps_values():
    err = ChainValidationError("cid-a", "cid-b")
    assert err.expected == "cid-a"
    assert err.actual == "cid-b"
    assert "cid-a" in str(err) and "cid-b" in str(err)


def test_sequence_validation_error_keeps_values():
    err = SequenceValidationError(0, 999)
    assert (err.expected, err.actual) == (0, 999)
    assert "999" in str(err)


def test_codec_range_error_reports_code_in_hex():
    err = InvalidCodecRangeError(0x100000)
    assert err.code == 0x100000
    assert "0x100000" in str(err)


@pytest.mark.parametrize(
    "error",
    [
        ChainValidationError("a", "b"),
        SequenceValidationError(1, 2),
        InvalidCidError("bad"),
        InvalidCodecRangeError(1),
        MultihashError("bad"),
        CborError("bad"),
        SerializationError("bad"),
    ],
)
def test_every_error_is_caught_by_base(error):
    with pytest.raises(IpldError) as info:
        raise error
    assert info.value is error


def test_value_errors_are_value_errors():
    cid_error = InvalidCidError("not a cid")
    multihash_error = MultihashError("truncated")
    assert isinstance(cid_error, ValueError)
    assert isinstance(multihash_error, ValueError)
    assert "not a cid" in str(cid_error)
    assert "truncated" in str(multihash_error)