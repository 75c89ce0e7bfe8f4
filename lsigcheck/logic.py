"""
Logic Signature Program Checker

Client-side static validation of a logic signature program before it is
submitted: version, serialized length (program plus arguments) and
execution cost. The program is never executed.

    ┌──────────────┐   ┌──────────────┐   ┌──────────────┐   ┌──────────────┐
    │   VERSION    │──▶│    LENGTH    │──▶│     SCAN     │──▶│     COST     │
    │ varint <=    │   │ program+args │   │ opcode table │   │ sum <=       │
    │ EvalMaxVer.  │   │ <= 1000      │   │ const blocks │   │ 20000        │
    └──────────────┘   └──────────────┘   └──────────────┘   └──────────────┘

Each gate raises on failure; the first failing gate is the reported error.

Example:
    from lsigcheck.logic import check_program

    check_program(bytes([0x01, 0x20, 0x01, 0x01, 0x22]))  # True

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from lsigcheck.constblock import const_block_size
from lsigcheck.errors import (
    InvalidInstruction,
    LogicError,
    MalformedVersion,
    ProgramTooCostly,
    ProgramTooLong,
    UnsupportedVersion,
)
from lsigcheck.observability import Layer, get_logger
from lsigcheck.opcodes import OpcodeTable, default_opcode_table
from lsigcheck.varint import decode_uvarint

logger = get_logger("checker", Layer.VALIDATOR)

MAX_COST = 20000
MAX_LENGTH = 1000


@dataclass(frozen=True)
class ValidationLimits:
    """Length and cost ceilings. The defaults are the network's values."""
    max_length: int = MAX_LENGTH
    max_cost: int = MAX_COST


DEFAULT_LIMITS = ValidationLimits()


@dataclass(frozen=True)
class ValidationReport:
    """Facts about a program that passed every gate."""
    version: int
    length: int
    cost: int
    instructions: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "length": self.length,
            "cost": self.cost,
            "instructions": self.instructions,
        }


class ProgramValidator:
    """
    Static checker bound to an opcode table and a set of limits.

    Without an explicit table the process-wide default table is used,
    resolved on each call so a validator created before startup
    initialization still sees the final table.
    """

    def __init__(
        self,
        table: Optional[OpcodeTable] = None,
        limits: ValidationLimits = DEFAULT_LIMITS,
    ):
        self._table = table
        self.limits = limits

    @property
    def table(self) -> OpcodeTable:
        return self._table if self._table is not None else default_opcode_table()

    def validate(
        self,
        program: bytes,
        args: Optional[Sequence[bytes]] = None,
    ) -> ValidationReport:
        """
        Run every gate over ``program``.

        Args:
            program: Program bytes, version varint first.
            args: Arguments submitted with the program. None means none.

        Returns:
            ValidationReport for an accepted program.

        Raises:
            LogicError subclass identifying the first failed gate.
        """
        try:
            report = self._validate(bytes(program), args or ())
        except LogicError as e:
            logger.warning(
                "Program rejected",
                operation="validate",
                error_code=e.code,
                reason=e.message,
                program_length=len(program),
            )
            raise
        logger.debug("Program accepted", operation="validate", **report.to_dict())
        return report

    def _validate(self, program: bytes, args: Sequence[bytes]) -> ValidationReport:
        table = self.table

        version = decode_uvarint(program)
        if not version.ok:
            raise MalformedVersion("version parsing error")
        if version.value > table.eval_max_version:
            raise UnsupportedVersion(version.value, table.eval_max_version)

        length = len(program) + sum(len(arg) for arg in args)
        if length > self.limits.max_length:
            raise ProgramTooLong(length, self.limits.max_length)

        cost = 0
        instructions = 0
        pc = version.length
        # Loop exits once pc reaches or passes the end; a final fixed-size
        # instruction that overruns the program is not flagged here.
        while pc < len(program):
            opcode = program[pc]
            desc = table.lookup(opcode)
            if desc is None:
                raise InvalidInstruction(opcode, pc)

            cost += desc.cost
            if desc.const_block is not None:
                pc += const_block_size(program, pc, desc.const_block)
            else:
                pc += desc.size
            instructions += 1

        if cost > self.limits.max_cost:
            raise ProgramTooCostly(cost, self.limits.max_cost)

        return ValidationReport(
            version=version.value,
            length=length,
            cost=cost,
            instructions=instructions,
        )


def check_program(
    program: bytes,
    args: Optional[Sequence[bytes]] = None,
    table: Optional[OpcodeTable] = None,
    limits: ValidationLimits = DEFAULT_LIMITS,
) -> bool:
    """
    Validate a program for length and execution cost.

    Returns True for an acceptable program and raises a LogicError
    subclass otherwise.
    """
    ProgramValidator(table, limits).validate(program, args)
    return True
