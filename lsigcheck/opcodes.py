"""
Opcode Table

Dense 256-slot table mapping an opcode byte to its static descriptor (cost
and encoded size). Lookups are a single list index.

A descriptor is one of two shapes:

    fixed           size >= 1, the instruction always occupies ``size`` bytes
    constant block  intcblock / bytecblock, size depends on the encoded
                    entries and is computed by the scanner

The language specification encodes the second shape as ``Size: 0``; that
sentinel is resolved here, once, when the table is built.

The process-wide default table is built lazily on first use under a lock, or
eagerly with ``init_opcode_table()``. Once built it is never mutated.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from lsigcheck.errors import InvariantViolation
from lsigcheck.langspec import LangSpec, load_langspec
from lsigcheck.observability import Layer, get_logger, timed_operation

logger = get_logger("table", Layer.OPCODES)

INTCBLOCK_OPCODE = 0x20
BYTECBLOCK_OPCODE = 0x26


class ConstBlockKind(Enum):
    """Entry encoding of a constant block."""
    INT = "int"
    BYTES = "byte[]"


CONST_BLOCK_OPCODES = {
    INTCBLOCK_OPCODE: ConstBlockKind.INT,
    BYTECBLOCK_OPCODE: ConstBlockKind.BYTES,
}


@dataclass(frozen=True)
class OpcodeDescriptor:
    """Static cost and size of one opcode."""
    opcode: int
    cost: int
    size: int = 1
    name: str = ""
    const_block: Optional[ConstBlockKind] = None

    def __post_init__(self):
        if not 0 <= self.opcode <= 0xFF:
            raise InvariantViolation(f"opcode out of range: {self.opcode}")
        if self.cost < 0:
            raise InvariantViolation(f"negative cost for opcode 0x{self.opcode:02x}")
        # A zero-sized fixed instruction would never advance the scan.
        if self.const_block is None and self.size < 1:
            raise InvariantViolation(
                f"fixed-size opcode 0x{self.opcode:02x} must have size >= 1"
            )

    @property
    def is_const_block(self) -> bool:
        return self.const_block is not None

    @classmethod
    def constant_block(cls, opcode: int, cost: int, name: str = "") -> "OpcodeDescriptor":
        kind = CONST_BLOCK_OPCODES.get(opcode)
        if kind is None:
            raise InvariantViolation(f"opcode 0x{opcode:02x} is not a constant block")
        return cls(opcode=opcode, cost=cost, size=0, name=name, const_block=kind)


class OpcodeTable:
    """
    Opcode byte -> descriptor.

    Later descriptors for the same opcode replace earlier ones.
    """

    def __init__(
        self,
        descriptors: Iterable[OpcodeDescriptor] = (),
        eval_max_version: int = 0,
        logic_sig_version: int = 0,
    ):
        self._slots: List[Optional[OpcodeDescriptor]] = [None] * 256
        for desc in descriptors:
            self._slots[desc.opcode] = desc
        self.eval_max_version = eval_max_version
        self.logic_sig_version = logic_sig_version

    def lookup(self, opcode: int) -> Optional[OpcodeDescriptor]:
        return self._slots[opcode]

    def __iter__(self) -> Iterator[OpcodeDescriptor]:
        return (desc for desc in self._slots if desc is not None)

    def __len__(self) -> int:
        return sum(1 for desc in self._slots if desc is not None)

    @classmethod
    def from_langspec(cls, spec: LangSpec) -> "OpcodeTable":
        """
        Build a table from a loaded language specification.

        ``Size: 0`` marks a constant block. Only intcblock and bytecblock
        may carry it; any other size-0 op is left out of the table, so a
        program using it is rejected as an invalid instruction.
        """
        descriptors: List[OpcodeDescriptor] = []
        for op in spec.ops:
            if op.size != 0:
                descriptors.append(OpcodeDescriptor(
                    opcode=op.opcode, cost=op.cost, size=op.size, name=op.name,
                ))
            elif op.opcode in CONST_BLOCK_OPCODES:
                descriptors.append(OpcodeDescriptor.constant_block(op.opcode, op.cost, op.name))
            else:
                logger.warning(
                    "Dropping variable-size op with no known layout",
                    opcode=op.opcode,
                    name=op.name,
                    source=spec.source,
                )
        return cls(
            descriptors,
            eval_max_version=spec.eval_max_version,
            logic_sig_version=spec.logic_sig_version,
        )


# =============================================================================
# PROCESS-WIDE DEFAULT TABLE
# =============================================================================

_default_table: Optional[OpcodeTable] = None
_default_lock = threading.Lock()


@timed_operation(logger, "build_opcode_table")
def _build_table(path: Optional[Union[str, Path]] = None) -> OpcodeTable:
    return OpcodeTable.from_langspec(load_langspec(path))


def init_opcode_table(path: Optional[Union[str, Path]] = None) -> OpcodeTable:
    """Build (or rebuild) the default table now. Intended for process startup."""
    global _default_table
    table = _build_table(path)
    with _default_lock:
        _default_table = table
    return table


def default_opcode_table() -> OpcodeTable:
    """The shared table, built from the configured langspec on first use."""
    global _default_table
    table = _default_table
    if table is not None:
        return table
    with _default_lock:
        if _default_table is None:
            _default_table = _build_table()
        return _default_table


def reset_opcode_table() -> None:
    """Forget the default table; the next lookup rebuilds it."""
    global _default_table
    with _default_lock:
        _default_table = None
