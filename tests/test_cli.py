"""
CLI Tests
"""

import json

import pytest

from lsigcheck import __version__
from lsigcheck.cli import EXIT_REJECTED, CLIError, load_program, main, parse_hex


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep default config lookups away from the developer's files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def _run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestProgramInput:
    """Program and argument decoding."""

    def test_hex_prefixed(self):
        assert load_program("0x0122") == b"\x01\x22"

    def test_bare_hex(self):
        assert load_program("0122") == b"\x01\x22"

    def test_hex_file(self, tmp_path):
        path = tmp_path / "prog.hex"
        path.write_text("0122\n")
        assert load_program(str(path)) == b"\x01\x22"

    def test_binary_file(self, tmp_path):
        path = tmp_path / "prog.bin"
        path.write_bytes(b"\x01\x22\x22")
        assert load_program(str(path)) == b"\x01\x22\x22"

    def test_bad_hex(self):
        with pytest.raises(CLIError, match="not valid hex"):
            parse_hex("zz", "argument")


class TestCheckCommand:
    """lsigcheck check"""

    def test_accepted(self, capsys):
        code, out, _ = _run(capsys, "check", "0x0120010122")
        assert code == 0
        result = json.loads(out)
        assert result == {"valid": True, "version": 1, "length": 5, "cost": 2, "instructions": 2}

    def test_unsupported_version(self, capsys):
        code, out, _ = _run(capsys, "check", "0x0322")
        assert code == EXIT_REJECTED
        assert json.loads(out)["error"] == "unsupported_version"

    def test_args_count_toward_length(self, capsys):
        code, out, _ = _run(capsys, "check", "0x0122", "--arg", "00" * 998)
        assert code == 0
        code, out, _ = _run(capsys, "check", "0x0122", "--arg", "00" * 998, "--arg", "ff")
        assert code == EXIT_REJECTED
        assert json.loads(out)["error"] == "program_too_long"

    def test_const_block_error(self, capsys):
        code, out, _ = _run(capsys, "check", "0x0120030102")
        assert code == EXIT_REJECTED
        result = json.loads(out)
        assert result["error"] == "const_block_decode"
        assert "const[2]" in result["message"]

    def test_custom_langspec(self, capsys, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text('{"EvalMaxVersion": 9, "Ops": [{"Opcode": 170, "Cost": 5, "Size": 1}]}')
        code, out, _ = _run(capsys, "check", "0x09aaaa", "--langspec", str(path))
        assert code == 0
        assert json.loads(out)["cost"] == 10

    def test_bad_program_hex(self, capsys):
        code, _, err = _run(capsys, "check", "nothex")
        assert code == 1
        assert "not valid hex" in err

    def test_quiet_suppresses_stderr(self, capsys):
        code, _, err = _run(capsys, "--quiet", "check", "nothex")
        assert code == 1
        assert err == ""

    def test_quiet_silences_rejection_log(self, capsys):
        code, out, err = _run(capsys, "--quiet", "check", "0x0322")
        assert code == EXIT_REJECTED
        assert json.loads(out)["error"] == "unsupported_version"
        assert "Program rejected" not in err

    def test_rejection_logged_without_quiet(self, capsys):
        _, _, err = _run(capsys, "check", "0x0322")
        assert "Program rejected" in err

    def test_text_format(self, capsys):
        code, out, _ = _run(capsys, "--format", "table", "check", "0x0122")
        assert code == 0
        assert "valid: True" in out


class TestLangspecCommand:
    """lsigcheck langspec show"""

    def test_show(self, capsys):
        code, out, _ = _run(capsys, "langspec", "show")
        assert code == 0
        result = json.loads(out)
        assert result["eval_max_version"] == 2
        ops = {op["name"]: op for op in result["ops"]}
        assert ops["intcblock"]["size"] == "int block"
        assert ops["bytecblock"]["size"] == "byte[] block"
        assert ops["txn"]["size"] == 2

    def test_show_table(self, capsys):
        code, out, _ = _run(capsys, "-f", "table", "langspec", "show")
        assert code == 0
        assert out.splitlines()[0].split(" | ")[0].strip() == "opcode"
        assert "ed25519verify" in out


class TestVarintCommands:
    """lsigcheck varint"""

    def test_decode(self, capsys):
        code, out, _ = _run(capsys, "varint", "decode", "ffffffffffffffffff01")
        assert code == 0
        assert json.loads(out) == {"value": 2**64 - 1, "length": 10, "status": "ok"}

    def test_decode_malformed(self, capsys):
        code, out, _ = _run(capsys, "varint", "decode", "80" * 11)
        assert json.loads(out)["status"] == "malformed"

    def test_decode_incomplete_with_offset(self, capsys):
        code, out, _ = _run(capsys, "varint", "decode", "0180", "--offset", "1")
        assert json.loads(out) == {"value": 0, "length": 0, "status": "incomplete"}

    def test_decode_negative_offset(self, capsys):
        code, out, err = _run(capsys, "varint", "decode", "8005", "--offset", "-1")
        assert code == 1
        assert out == ""
        assert "non-negative" in err

    def test_encode(self, capsys):
        code, out, _ = _run(capsys, "varint", "encode", "300")
        assert code == 0
        assert json.loads(out) == {"value": 300, "hex": "ac02", "length": 2}

    def test_encode_negative(self, capsys):
        code, _, err = _run(capsys, "varint", "encode", "-5")
        assert code == 1
        assert "non-negative" in err


class TestConfigCommands:
    """lsigcheck config"""

    def test_get(self, capsys):
        code, out, _ = _run(capsys, "config", "get", "observability.log_level")
        assert code == 0
        assert json.loads(out) == {"observability.log_level": "warning"}

    def test_explicit_config_file(self, capsys, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("observability:\n  log_level: error\n")
        code, out, _ = _run(capsys, "--config", str(path), "config", "get", "observability.log_level")
        assert json.loads(out) == {"observability.log_level": "error"}

    def test_default_config_file(self, capsys, tmp_path):
        (tmp_path / "lsigcheck.yaml").write_text("observability:\n  log_format: text\n")
        code, out, _ = _run(capsys, "config", "show")
        assert json.loads(out)["observability"]["log_format"] == "text"

    def test_validate_failure(self, capsys, monkeypatch):
        monkeypatch.setenv("LSIG_LOG_FORMAT", "xml")
        code, _, err = _run(capsys, "config", "validate")
        assert code == 1
        assert "observability.log_format" in err


class TestMisc:
    """Top-level behaviour."""

    def test_no_command_prints_help(self, capsys):
        code, out, _ = _run(capsys)
        assert code == 0
        assert "usage: lsigcheck" in out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_missing_subcommand(self, capsys):
        code, _, err = _run(capsys, "varint")
        assert code == 1
        assert "Unknown command" in err
