"""
Logic Signature Validation Errors

Typed failures for the static program checker. Every rejection raised by the
validator derives from LogicError and carries a stable ``code`` string so that
callers (and the CLI) can branch on the failed gate without parsing messages.

Gate order (first failure wins):

    malformed_version -> unsupported_version -> program_too_long
        -> invalid_instruction / const_block_decode -> program_too_costly

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# PROGRAM REJECTIONS
# =============================================================================

class LogicError(Exception):
    """Base exception for a rejected program."""

    code: str = "logic_error"

    def __init__(self, message: str = ""):
        self.message = message or self.code
        super().__init__(self.message)


class MalformedVersion(LogicError):
    """The leading version varint is absent or malformed."""
    code = "malformed_version"


class UnsupportedVersion(LogicError):
    """Program version is newer than the loaded language spec supports."""
    code = "unsupported_version"

    def __init__(self, version: int, max_version: int):
        self.version = version
        self.max_version = max_version
        super().__init__(f"unsupported version {version} (max {max_version})")


class ProgramTooLong(LogicError):
    """Program plus arguments exceed the maximum serialized length."""
    code = "program_too_long"

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"program too long: {length} > {max_length} bytes")


class InvalidInstruction(LogicError):
    """Opcode byte has no descriptor in the opcode table."""
    code = "invalid_instruction"

    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"invalid instruction 0x{opcode:02x} at pc={pc}")


class ConstBlockDecodeError(LogicError):
    """
    A constant block could not be decoded.

    ``pc`` is the position of the block's opcode byte. ``index`` is the entry
    that failed, or None when the entry count itself could not be read.
    """
    code = "const_block_decode"

    def __init__(self, kind: str, pc: int, index: Optional[int] = None, reason: str = ""):
        self.kind = kind
        self.pc = pc
        self.index = index
        self.reason = reason
        where = f"{kind} const block" if index is None else f"{kind} const[{index}] block"
        message = f"could not decode {where} at pc={pc}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ProgramTooCostly(LogicError):
    """Summed opcode cost exceeds the cost budget."""
    code = "program_too_costly"

    def __init__(self, cost: int, max_cost: int):
        self.cost = cost
        self.max_cost = max_cost
        super().__init__(f"program too costly to run: {cost} > {max_cost}")


# =============================================================================
# SUPPORTING ERRORS
# =============================================================================

class LangSpecError(Exception):
    """Language specification could not be loaded or failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None):
        self.errors = errors or []
        super().__init__(message)


class InvariantViolation(Exception):
    """Opcode table invariant violated."""
    pass
