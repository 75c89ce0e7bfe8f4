import os
import pathlib
import sys

import pytest


# Ensure repo root is on PYTHONPATH for direct package imports (e.g. `import lsigcheck`).
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from lsigcheck.config import get_config_manager  # noqa: E402
from lsigcheck.observability import configure_logging  # noqa: E402
from lsigcheck.opcodes import (  # noqa: E402
    BYTECBLOCK_OPCODE,
    INTCBLOCK_OPCODE,
    OpcodeDescriptor,
    OpcodeTable,
    reset_opcode_table,
)

# Opcodes used by the hand-built test table.
NOP = 0x80          # fixed, size 1, cost 0
ADD = 0x08          # fixed, size 1, cost 1
HEAVY = 0x90        # fixed, size 1, cost 1000
TXN = 0x31          # fixed, size 2, cost 1
GTXN = 0x33         # fixed, size 3, cost 1


@pytest.fixture(autouse=True)
def isolated_state(monkeypatch):
    """Fresh configuration and default opcode table for every test."""
    for name in list(os.environ):
        if name.startswith("LSIG_"):
            monkeypatch.delenv(name)
    get_config_manager().reset()
    reset_opcode_table()
    yield
    get_config_manager().reset()
    reset_opcode_table()
    configure_logging()


@pytest.fixture
def table() -> OpcodeTable:
    """Small table with predictable costs and sizes."""
    return OpcodeTable(
        [
            OpcodeDescriptor(NOP, cost=0, name="nop"),
            OpcodeDescriptor(ADD, cost=1, name="+"),
            OpcodeDescriptor(HEAVY, cost=1000, name="heavy"),
            OpcodeDescriptor(TXN, cost=1, size=2, name="txn"),
            OpcodeDescriptor(GTXN, cost=1, size=3, name="gtxn"),
            OpcodeDescriptor.constant_block(INTCBLOCK_OPCODE, cost=1, name="intcblock"),
            OpcodeDescriptor.constant_block(BYTECBLOCK_OPCODE, cost=1, name="bytecblock"),
        ],
        eval_max_version=2,
        logic_sig_version=2,
    )
