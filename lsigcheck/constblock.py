"""
Constant Block Sizing

intcblock and bytecblock carry their constants inline:

    intcblock   0x20 <count> <varint> <varint> ...
    bytecblock  0x26 <count> <len><bytes...> <len><bytes...> ...

The size of such an instruction is only known after walking its entries.
Every read is bounds-checked against the program before it happens; an entry
that starts at or past the end of the program, a truncated or malformed
varint, or a byte string longer than the remaining program all raise
ConstBlockDecodeError.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import Tuple

from lsigcheck.errors import ConstBlockDecodeError
from lsigcheck.opcodes import ConstBlockKind
from lsigcheck.varint import VarintResult, decode_uvarint


def _varint_problem(result: VarintResult, at: int) -> str:
    if result.length == 0:
        return f"truncated varint at offset {at}"
    return f"malformed varint at offset {at}"


def _read_count(program: bytes, pc: int, kind: ConstBlockKind) -> Tuple[int, int]:
    """Return (entry count, bytes used by opcode + count)."""
    size = 1
    result = decode_uvarint(program, pc + size)
    if not result.ok:
        raise ConstBlockDecodeError(kind.value, pc, reason=_varint_problem(result, pc + size))
    return result.value, size + result.length


def _read_entry_varint(program: bytes, pc: int, size: int, index: int, kind: ConstBlockKind) -> VarintResult:
    at = pc + size
    if at >= len(program):
        raise ConstBlockDecodeError(kind.value, pc, index, "block exceeds program length")
    result = decode_uvarint(program, at)
    if not result.ok:
        raise ConstBlockDecodeError(kind.value, pc, index, _varint_problem(result, at))
    return result


def int_const_block_size(program: bytes, pc: int) -> int:
    """Bytes occupied by the intcblock whose opcode is at ``pc``."""
    kind = ConstBlockKind.INT
    count, size = _read_count(program, pc, kind)
    for i in range(count):
        size += _read_entry_varint(program, pc, size, i, kind).length
    return size


def byte_const_block_size(program: bytes, pc: int) -> int:
    """Bytes occupied by the bytecblock whose opcode is at ``pc``."""
    kind = ConstBlockKind.BYTES
    count, size = _read_count(program, pc, kind)
    for i in range(count):
        result = _read_entry_varint(program, pc, size, i, kind)
        size += result.length
        if pc + size + result.value > len(program):
            raise ConstBlockDecodeError(
                kind.value, pc, i,
                f"{result.value}-byte constant exceeds program length",
            )
        size += result.value
    return size


def const_block_size(program: bytes, pc: int, kind: ConstBlockKind) -> int:
    if kind is ConstBlockKind.INT:
        return int_const_block_size(program, pc)
    return byte_const_block_size(program, pc)
