import pytest

from kbdtools.utf8 import encode_ucs


@pytest.mark.parametrize(
    "code_point",
    [0, 0x41, 0x7F, 0x80, 0x7FF, 0x800, 0xFFFF, 0x10000, 0x10FFFF],
)
def test_matches_standard_utf8(code_point):
    assert encode_ucs(code_point) == chr(code_point).encode("utf-8")


def test_ascii_is_single_byte():
    assert encode_ucs(ord("A")) == b"A"


def _decode(data):
    lead = data[0]
    value = lead & (0xFF >> (len(data) + 1)) if len(data) > 1 else lead
    for byte in data[1:]:
        value = (value << 6) | (byte & 0x3F)
    return value


@pytest.mark.parametrize("value", [0x200000, 0x3FFFFFF, 0x1234567])
def test_five_byte_form(value):
    encoded = encode_ucs(value)
    assert len(encoded) == 5
    assert encoded[0] & 0xF8 == 0xF8
    assert all(0x80 <= b <= 0xBF for b in encoded[1:])
    assert _decode(encoded) == value


@pytest.mark.parametrize("value", [0x4000000, 0x7FFFFFFF])
def test_six_byte_form(value):
    encoded = encode_ucs(value)
    assert len(encoded) == 6
    assert encoded[0] & 0xFC == 0xFC
    assert all(0x80 <= b <= 0xBF for b in encoded[1:])


def test_length_grows_monotonically():
    values = [0x7F, 0x7FF, 0xFFFF, 0x1FFFFF, 0x3FFFFFF, 0xFFFFFFFF]
    lengths = [len(encode_ucs(v)) for v in values]
    assert lengths == sorted(lengths)
    assert lengths[0] == 1
    assert lengths[-1] == 6


def test_negative_rejected():
    with pytest.raises(ValueError):
        encode_ucs(-1)


def test_too_large_rejected():
    with pytest.raises(ValueError):
        encode_ucs(1 << 40)