"""
Language Specification Loader

Reads the published language specification (``langspec.json``) and keeps
only what static checking needs: the highest supported program version and
the opcode/cost/size triple of every op. All other fields (documentation,
argument enums, groups) are accepted and ignored.

The document is checked against a JSON Schema before use so that a bad
table is reported at load time rather than as a confusing scan failure.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from jsonschema import Draft202012Validator

from lsigcheck.errors import LangSpecError
from lsigcheck.observability import Layer, get_logger

logger = get_logger("loader", Layer.LANGSPEC)

BUNDLED_LANGSPEC = Path(__file__).resolve().parent / "data" / "langspec.json"

LANGSPEC_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["EvalMaxVersion", "Ops"],
    "properties": {
        "EvalMaxVersion": {"type": "integer", "minimum": 0},
        "LogicSigVersion": {"type": "integer", "minimum": 0},
        "Ops": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["Opcode", "Cost", "Size"],
                "properties": {
                    "Opcode": {"type": "integer", "minimum": 0, "maximum": 255},
                    "Name": {"type": "string"},
                    "Cost": {"type": "integer", "minimum": 0},
                    "Size": {"type": "integer", "minimum": 0},
                },
            },
        },
    },
}

_validator = Draft202012Validator(LANGSPEC_SCHEMA)


@dataclass(frozen=True)
class OpSpec:
    """One entry of the ``Ops`` list."""
    opcode: int
    name: str
    cost: int
    size: int


@dataclass(frozen=True)
class LangSpec:
    """The parts of the language specification the checker consumes."""
    eval_max_version: int
    logic_sig_version: int
    ops: Tuple[OpSpec, ...]
    source: str = "<memory>"


def langspec_errors(data: Any) -> List[str]:
    """Schema violations of a decoded langspec document (empty if valid)."""
    errors = sorted(_validator.iter_errors(data), key=lambda e: e.json_path)
    return [f"{error.json_path}: {error.message}" for error in errors]


def parse_langspec(data: Any, source: str = "<memory>") -> LangSpec:
    """Build a LangSpec from an already-decoded JSON document."""
    errors = langspec_errors(data)
    if errors:
        raise LangSpecError(f"invalid langspec {source}: {errors[0]}", errors)

    ops = tuple(
        OpSpec(
            opcode=op["Opcode"],
            name=op.get("Name", ""),
            cost=op["Cost"],
            size=op["Size"],
        )
        for op in data["Ops"]
    )
    return LangSpec(
        eval_max_version=data["EvalMaxVersion"],
        logic_sig_version=data.get("LogicSigVersion", data["EvalMaxVersion"]),
        ops=ops,
        source=source,
    )


def load_langspec(path: Optional[Union[str, Path]] = None) -> LangSpec:
    """
    Load a langspec file.

    Args:
        path: File to read. Defaults to ``langspec.path`` from the
            configuration, or the bundled specification when that is empty.

    Raises:
        LangSpecError: file missing or unreadable, not UTF-8 JSON, or not
            schema-valid.
    """
    if path is None:
        from lsigcheck.config import get_config
        path = get_config().langspec.path.get() or BUNDLED_LANGSPEC
    path = Path(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise LangSpecError(f"langspec not found: {path}") from e
    except json.JSONDecodeError as e:
        raise LangSpecError(f"langspec is not valid JSON: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise LangSpecError(f"langspec is not UTF-8: {path}: {e}") from e
    except OSError as e:
        raise LangSpecError(f"langspec could not be read: {path}: {e}") from e

    spec = parse_langspec(data, source=str(path))
    logger.info(
        "Loaded langspec",
        operation="load_langspec",
        source=spec.source,
        eval_max_version=spec.eval_max_version,
        ops=len(spec.ops),
    )
    return spec
