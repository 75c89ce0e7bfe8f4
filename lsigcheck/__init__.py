"""
lsigcheck — Logic Signature Program Checker

Static, client-side validation of logic signature programs before they are
submitted to the network. A program is accepted only if it declares a
supported version, fits the length limit together with its arguments, and
its summed opcode cost stays within budget.

Module Index
────────────

    varint.py         Unsigned LEB128 varint codec
    langspec.py       langspec.json loading and schema validation
    opcodes.py        Dense opcode table, race-free default instance
    constblock.py     intcblock / bytecblock sizing
    logic.py          ProgramValidator and check_program
    errors.py         Rejection taxonomy
    config.py         YAML / environment configuration
    observability.py  Structured logging
    cli.py            Command-line interface

Copyright (c) 2026 Momentum. All rights reserved.
"""

__version__ = "0.1.0"


# Lazy imports keep ``import lsigcheck`` free of langspec/config side effects.
def __getattr__(name):
    """Lazy import submodules on first access."""

    if name in ("check_program", "ProgramValidator", "ValidationLimits",
                "ValidationReport", "MAX_COST", "MAX_LENGTH"):
        from lsigcheck import logic
        return getattr(logic, name)

    if name in ("OpcodeTable", "OpcodeDescriptor", "ConstBlockKind",
                "default_opcode_table", "init_opcode_table", "reset_opcode_table",
                "INTCBLOCK_OPCODE", "BYTECBLOCK_OPCODE"):
        from lsigcheck import opcodes
        return getattr(opcodes, name)

    if name in ("LangSpec", "OpSpec", "load_langspec", "parse_langspec"):
        from lsigcheck import langspec
        return getattr(langspec, name)

    if name in ("VarintResult", "decode_uvarint", "encode_uvarint"):
        from lsigcheck import varint
        return getattr(varint, name)

    if name in ("LogicError", "MalformedVersion", "UnsupportedVersion",
                "ProgramTooLong", "InvalidInstruction", "ConstBlockDecodeError",
                "ProgramTooCostly", "LangSpecError", "InvariantViolation"):
        from lsigcheck import errors
        return getattr(errors, name)

    raise AttributeError(f"module 'lsigcheck' has no attribute '{name}'")


__all__ = [
    "__version__",
    "check_program",
    "ProgramValidator",
    "ValidationLimits",
    "ValidationReport",
    "MAX_COST",
    "MAX_LENGTH",
    "OpcodeTable",
    "OpcodeDescriptor",
    "ConstBlockKind",
    "default_opcode_table",
    "init_opcode_table",
    "reset_opcode_table",
    "INTCBLOCK_OPCODE",
    "BYTECBLOCK_OPCODE",
    "LangSpec",
    "OpSpec",
    "load_langspec",
    "parse_langspec",
    "VarintResult",
    "decode_uvarint",
    "encode_uvarint",
    "LogicError",
    "MalformedVersion",
    "UnsupportedVersion",
    "ProgramTooLong",
    "InvalidInstruction",
    "ConstBlockDecodeError",
    "ProgramTooCostly",
    "LangSpecError",
    "InvariantViolation",
]
