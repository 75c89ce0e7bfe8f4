"""
Unsigned Varint Codec

LEB128-style unsigned integers as used by program headers and constant
blocks: seven payload bits per byte, least significant group first, high bit
set on every byte except the last.

A 64-bit value needs at most 10 bytes, and the 10th byte may only carry a
single payload bit. Anything longer or wider is malformed rather than
silently truncated.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import NamedTuple

MAX_VARINT_LEN = 10
MAX_UVARINT = (1 << 64) - 1


class VarintResult(NamedTuple):
    """
    Outcome of a decode.

    length == 0: input exhausted before a terminating byte.
    length < 0:  malformed; -length bytes were examined.
    otherwise:   value holds the magnitude and length bytes were consumed.
    """
    value: int
    length: int

    @property
    def ok(self) -> bool:
        return self.length > 0


def decode_uvarint(data: bytes, offset: int = 0) -> VarintResult:
    """Decode one varint starting at ``offset`` without copying ``data``."""
    if offset < 0:
        raise ValueError("offset must be non-negative")
    value = 0
    shift = 0
    for i in range(len(data) - offset):
        if i == MAX_VARINT_LEN:
            return VarintResult(0, -(i + 1))
        b = data[offset + i]
        if b < 0x80:
            if i == MAX_VARINT_LEN - 1 and b > 1:
                return VarintResult(0, -(i + 1))
            return VarintResult(value | (b << shift), i + 1)
        value |= (b & 0x7F) << shift
        shift += 7
    return VarintResult(0, 0)


def encode_uvarint(value: int) -> bytes:
    """Encode a non-negative integer below 2**64."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value > MAX_UVARINT:
        raise ValueError("value must be <= 2^64-1")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)
