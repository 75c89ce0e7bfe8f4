"""
Varint Codec Tests

Decoding boundaries: empty and truncated input, the 10-byte / 64-bit limit,
and decoding from an offset inside a larger buffer.
"""

import pytest

from lsigcheck.varint import (
    MAX_UVARINT,
    VarintResult,
    decode_uvarint,
    encode_uvarint,
)


class TestDecode:
    """Decoding well-formed varints."""

    @pytest.mark.parametrize("value,length", [
        (0, 1),
        (1, 1),
        (127, 1),
        (128, 2),
        (300, 2),
        (16383, 2),
        (16384, 3),
        (2**32 - 1, 5),
        (2**63, 10),
        (MAX_UVARINT, 10),
    ])
    def test_round_trip(self, value, length):
        encoded = encode_uvarint(value)
        assert len(encoded) == length
        assert decode_uvarint(encoded) == VarintResult(value, length)

    def test_known_encoding(self):
        assert encode_uvarint(300) == b"\xac\x02"
        assert decode_uvarint(b"\xac\x02") == (300, 2)

    def test_stops_at_first_terminating_byte(self):
        result = decode_uvarint(b"\x05\xff\xff")
        assert result == (5, 1)

    def test_decode_from_offset(self):
        data = b"\xff\xff" + encode_uvarint(1000) + b"\x00"
        assert decode_uvarint(data, 2) == (1000, 2)

    def test_non_canonical_padding_is_accepted(self):
        # 0x80 0x00 is a redundant encoding of zero; only width is policed.
        assert decode_uvarint(b"\x80\x00") == (0, 2)


class TestIncomplete:
    """Input that ends before a terminating byte."""

    def test_empty_buffer(self):
        result = decode_uvarint(b"")
        assert result == (0, 0)
        assert not result.ok

    def test_only_continuation_bytes(self):
        assert decode_uvarint(b"\x80\x80\x80") == (0, 0)

    def test_offset_at_end(self):
        assert decode_uvarint(b"\x01\x02", 2) == (0, 0)

    def test_offset_past_end(self):
        assert decode_uvarint(b"\x01", 5) == (0, 0)

    def test_negative_offset_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            decode_uvarint(b"\x80\x05", -1)


class TestMalformed:
    """Encodings wider than 64 bits."""

    def test_eleven_continuation_bytes(self):
        result = decode_uvarint(b"\x80" * 11)
        assert result.length < 0
        assert result == (0, -11)
        assert not result.ok

    def test_longer_runs_stop_at_eleventh_byte(self):
        assert decode_uvarint(b"\xff" * 20) == (0, -11)

    def test_tenth_byte_payload_over_one(self):
        assert decode_uvarint(b"\xff" * 9 + b"\x02") == (0, -10)

    def test_tenth_byte_payload_of_one_is_max(self):
        assert decode_uvarint(b"\xff" * 9 + b"\x01") == (MAX_UVARINT, 10)

    def test_eleventh_byte_terminator_still_malformed(self):
        assert decode_uvarint(b"\x80" * 10 + b"\x00") == (0, -11)


class TestEncode:
    """Encoder argument checks."""

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            encode_uvarint(-1)

    def test_too_wide_rejected(self):
        with pytest.raises(ValueError):
            encode_uvarint(MAX_UVARINT + 1)
