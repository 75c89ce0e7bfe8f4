#!/usr/bin/env python3
"""
lsigcheck CLI

Command-line access to the logic signature checker.

Usage:
    lsigcheck <command> [subcommand] [options]

Commands:
    check       Validate a program (exit 0 accepted, 2 rejected, 1 error)
    langspec    Inspect the loaded language specification
    varint      Encode / decode unsigned varints
    config      Configuration management

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import argparse
import json
import sys
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from lsigcheck import __version__
from lsigcheck.errors import LogicError

EXIT_REJECTED = 2


class OutputFormat(Enum):
    """Output format options."""
    JSON = "json"
    YAML = "yaml"
    TABLE = "table"
    TEXT = "text"


class CLIError(Exception):
    """CLI error with exit code."""
    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def format_output(data: Any, fmt: OutputFormat = OutputFormat.JSON) -> str:
    """Format data for output."""
    if fmt == OutputFormat.JSON:
        return json.dumps(data, indent=2, default=str)
    elif fmt == OutputFormat.YAML:
        import yaml
        return yaml.dump(data, default_flow_style=False)
    elif fmt == OutputFormat.TABLE:
        return _format_table(data)
    else:
        return str(data)


def _format_table(data: Any) -> str:
    """Format data as ASCII table."""
    if isinstance(data, dict):
        rows = [v for v in data.values() if isinstance(v, list)]
        if rows and rows[0] and isinstance(rows[0][0], dict):
            data = rows[0]
    if isinstance(data, list) and data and isinstance(data[0], dict):
        headers = list(data[0].keys())
        rows = [[str(row.get(h, ""))[:40] for h in headers] for row in data]
        widths = [max(len(h), max(len(r[i]) for r in rows)) for i, h in enumerate(headers)]

        lines = []
        lines.append(" | ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
        lines.append("-+-".join("-" * w for w in widths))
        for row in rows:
            lines.append(" | ".join(c.ljust(widths[i]) for i, c in enumerate(row)))
        return "\n".join(lines)
    elif isinstance(data, dict):
        return "\n".join(f"{k}: {v}" for k, v in data.items())
    return str(data)


def parse_hex(value: str, what: str = "value") -> bytes:
    """Decode ``0x``-prefixed or bare hex."""
    text = value[2:] if value.lower().startswith("0x") else value
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise CLIError(f"{what} is not valid hex: {value!r}")


def load_program(source: str) -> bytes:
    """Program bytes from hex text, a ``.hex`` file, or a binary file."""
    if source.lower().startswith("0x"):
        return parse_hex(source, "program")
    path = Path(source)
    if path.is_file():
        if path.suffix == ".hex":
            return parse_hex(path.read_text(encoding="utf-8").strip(), "program")
        return path.read_bytes()
    return parse_hex(source, "program")


class LsigCLI:
    """Main CLI application."""

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="lsigcheck",
            description="Static length and cost checker for logic signature programs",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.parser.add_argument(
            "--version", "-V",
            action="version",
            version=f"lsigcheck {__version__}",
        )
        self.parser.add_argument(
            "--format", "-f",
            choices=["json", "yaml", "table", "text"],
            default="json",
            help="Output format (default: json)",
        )
        self.parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress error messages and warning logs on stderr",
        )
        self.parser.add_argument(
            "--config", "-c",
            help="YAML configuration file (default: lsigcheck.yaml lookup)",
        )

        self.subparsers = self.parser.add_subparsers(dest="command", help="Commands")
        self._register_commands()

    def _register_commands(self) -> None:
        self._register_check_command()
        self._register_langspec_commands()
        self._register_varint_commands()
        self._register_config_commands()

    def _register_check_command(self) -> None:
        check = self.subparsers.add_parser("check", help="Validate a program")
        check.add_argument("program", help="0x-hex, hex string, .hex file or binary file")
        check.add_argument(
            "--arg", "-a",
            action="append",
            default=[],
            dest="args",
            help="Program argument as hex (repeatable)",
        )
        check.add_argument("--langspec", "-l", help="langspec.json to build the opcode table from")

    def _register_langspec_commands(self) -> None:
        langspec = self.subparsers.add_parser("langspec", help="Language specification")
        langspec_sub = langspec.add_subparsers(dest="subcommand")

        show = langspec_sub.add_parser("show", help="Show versions and opcode table")
        show.add_argument("--langspec", "-l", help="langspec.json to read")

    def _register_varint_commands(self) -> None:
        varint = self.subparsers.add_parser("varint", help="Varint helpers")
        varint_sub = varint.add_subparsers(dest="subcommand")

        decode = varint_sub.add_parser("decode", help="Decode a varint from hex")
        decode.add_argument("data", help="Hex bytes")
        decode.add_argument("--offset", type=int, default=0, help="Start offset")

        encode = varint_sub.add_parser("encode", help="Encode an integer")
        encode.add_argument("value", type=int, help="Non-negative integer")

    def _register_config_commands(self) -> None:
        config = self.subparsers.add_parser("config", help="Configuration management")
        config_sub = config.add_subparsers(dest="subcommand")

        get = config_sub.add_parser("get", help="Get configuration value")
        get.add_argument("path", help="Config path (e.g., observability.log_level)")

        config_sub.add_parser("show", help="Show all configuration")
        config_sub.add_parser("validate", help="Validate configuration")

    def run(self, args: Optional[List[str]] = None) -> int:
        """Run the CLI."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 0

        fmt = OutputFormat(parsed.format)
        try:
            self._load_config(parsed.config, parsed.quiet)
            result = self._dispatch(parsed)

            if result is not None:
                print(format_output(result, fmt))

            return 0

        except LogicError as e:
            print(format_output({"valid": False, "error": e.code, "message": e.message}, fmt))
            return EXIT_REJECTED

        except CLIError as e:
            if not parsed.quiet:
                print(f"Error: {e}", file=sys.stderr)
            return e.exit_code

        except Exception as e:
            if not parsed.quiet:
                print(f"Error: {e}", file=sys.stderr)
            return 1

    def _load_config(self, path: Optional[str], quiet: bool = False) -> None:
        from lsigcheck.config import get_config_manager
        from lsigcheck.observability import LogLevel, configure_logging

        mgr = get_config_manager()
        if path:
            mgr.load_from_file(path)
        else:
            mgr.load_defaults()
        configure_logging(LogLevel.ERROR if quiet else None)

    def _dispatch(self, args: argparse.Namespace) -> Any:
        """Dispatch command to handler."""
        cmd = args.command
        subcmd = getattr(args, "subcommand", None)

        handler_name = f"_handle_{cmd}_{subcmd}" if subcmd else f"_handle_{cmd}"
        handler = getattr(self, handler_name, None)

        if handler is None:
            raise CLIError(f"Unknown command: {cmd} {subcmd or ''}".strip())

        return handler(args)

    # Check
    def _handle_check(self, args: argparse.Namespace) -> Any:
        from lsigcheck.langspec import load_langspec
        from lsigcheck.logic import ProgramValidator
        from lsigcheck.opcodes import OpcodeTable

        program = load_program(args.program)
        program_args = [parse_hex(a, "argument") for a in args.args]
        table = OpcodeTable.from_langspec(load_langspec(args.langspec)) if args.langspec else None

        report = ProgramValidator(table).validate(program, program_args)
        return {"valid": True, **report.to_dict()}

    # Langspec
    def _handle_langspec_show(self, args: argparse.Namespace) -> Any:
        from lsigcheck.langspec import load_langspec
        from lsigcheck.opcodes import OpcodeTable

        spec = load_langspec(args.langspec)
        table = OpcodeTable.from_langspec(spec)
        return {
            "source": spec.source,
            "eval_max_version": table.eval_max_version,
            "logic_sig_version": table.logic_sig_version,
            "ops": [
                {
                    "opcode": f"0x{desc.opcode:02x}",
                    "name": desc.name,
                    "cost": desc.cost,
                    "size": desc.const_block.value + " block" if desc.const_block else desc.size,
                }
                for desc in table
            ],
        }

    # Varint
    def _handle_varint_decode(self, args: argparse.Namespace) -> Any:
        from lsigcheck.varint import decode_uvarint

        try:
            result = decode_uvarint(parse_hex(args.data, "data"), args.offset)
        except ValueError as e:
            raise CLIError(str(e))
        status = "ok" if result.ok else ("incomplete" if result.length == 0 else "malformed")
        return {"value": result.value, "length": result.length, "status": status}

    def _handle_varint_encode(self, args: argparse.Namespace) -> Any:
        from lsigcheck.varint import encode_uvarint

        try:
            encoded = encode_uvarint(args.value)
        except ValueError as e:
            raise CLIError(str(e))
        return {"value": args.value, "hex": encoded.hex(), "length": len(encoded)}

    # Config
    def _handle_config_get(self, args: argparse.Namespace) -> Any:
        from lsigcheck.config import get_config_manager
        return {args.path: get_config_manager().get(args.path)}

    def _handle_config_show(self, args: argparse.Namespace) -> Any:
        from lsigcheck.config import get_config_manager
        return get_config_manager().config.to_dict()

    def _handle_config_validate(self, args: argparse.Namespace) -> Any:
        from lsigcheck.config import get_config_manager
        errors = get_config_manager().validate()
        if errors:
            raise CLIError("; ".join(errors))
        return {"valid": True}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    cli = LsigCLI()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
