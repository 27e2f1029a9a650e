"""Encoding of character values into the original (up to six byte) UTF-8 form."""

__all__ = ["encode_ucs"]

_CONTINUATION_TAG = 0x80
_CONTINUATION_MASK = 0x3F
_BITS_PER_CONTINUATION = 6

# (largest value, lead byte tag, number of continuation bytes)
_FORMS = (
    (0x7F, 0x00, 0),
    (0x7FF, 0xC0, 1),
    (0xFFFF, 0xE0, 2),
    (0x1FFFFF, 0xF0, 3),
    (0x3FFFFFF, 0xF8, 4),
    (0xFFFFFFFF, 0xFC, 5),
)


def encode_ucs(wc: int) -> bytes:
    """Encode a 32-bit character value as UTF-8, using up to six bytes."""
    if wc < 0 or wc > 0xFFFFFFFF:
        raise ValueError(f"character value out of range: {wc}")
    for limit, tag, continuations in _FORMS:
        if wc <= limit:
            break
    shift = _BITS_PER_CONTINUATION * continuations
    lead = tag | ((wc >> shift) & (0xFF ^ tag))
    tail = bytes(
        _CONTINUATION_TAG
        | ((wc >> (_BITS_PER_CONTINUATION * k)) & _CONTINUATION_MASK)
        for k in reversed(range(continuations))
    )
    return bytes([lead]) + tail