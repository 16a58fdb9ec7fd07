"""Tests for the mbase command-line interface.

WHY: Shell scripts depend on the CLI's stdout, its exit codes and the
shape of its --json documents. A renamed JSON field or a changed exit
status breaks callers silently, so each command is run end to end and
its JSON output is validated against the checked-in schemas.

HOW: main() is called with an argv list; stdout/stderr are captured with
capsys, exit statuses come from SystemExit, files go through tmp_path
and stdin is replaced with an in-memory binary stream.

RULES:
- Successful commands return normally (no SystemExit)
- Failures exit with the documented status: 10 invalid input,
  11 checksum, 12 I/O, 13 unknown codec
- Every --json document with a schema is validated with jsonschema
"""

import io
import json
import logging
import sys

import jsonschema
import pytest

from conftest import load_schema
from mbase import config
from mbase.cli import build_parser, exit_code_for, main
from mbase.core.errors import (
    ChecksumMismatch,
    CodecNotFound,
    InvalidCharacter,
    InvalidInput,
    IoError,
    MbaseError,
)
from mbase.streams import hex_preview, read_input, write_output


def run(capsys, *argv):
    """Run the CLI and return (exit_code, stdout, stderr)."""
    try:
        main(list(argv))
        code = 0
    except SystemExit as exc:
        code = exc.code
    out, err = capsys.readouterr()
    return code, out, err


def run_json(capsys, *argv):
    code, out, _ = run(capsys, *argv, "--json")
    assert code == 0
    return json.loads(out)


# =========================================================================
# enc / dec / conv
# =========================================================================

class TestEncodeDecode:
    def test_enc(self, capsys):
        assert run(capsys, "enc", "-c", "base64", "Hello") == (0, "SGVsbG8\n", "")

    def test_enc_multibase(self, capsys):
        code, out, _ = run(capsys, "enc", "-c", "base58btc", "--multibase", "Hello")
        assert code == 0
        assert out == "z9Ajdvzr\n"

    def test_enc_multibase_without_code(self, capsys):
        code, _, err = run(capsys, "enc", "-c", "morse", "--multibase", "SOS")
        assert code == 10
        assert err.startswith("Error: morse has no multibase code")

    def test_enc_all(self, capsys):
        doc = run_json(capsys, "enc", "--all", "Hi")
        assert doc["input_bytes"] == 2
        outputs = {r["codec"]: r["output"] for r in doc["results"]}
        assert outputs["base16lower"] == "4869"
        assert outputs["rot13"] == "Uv"

    def test_dec(self, capsys):
        assert run(capsys, "dec", "-c", "base64", "SGVsbG8") == (0, "Hello", "")

    def test_dec_strips_trailing_newline(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"SGVsbG8\n")))
        assert run(capsys, "dec", "-c", "base64")[1] == "Hello"

    def test_dec_multibase(self, capsys):
        code, out, _ = run(capsys, "dec", "--multibase", "f48656c6c6f")
        assert (code, out) == (0, "Hello")

    def test_dec_lenient(self, capsys):
        code, out, _ = run(capsys, "dec", "-c", "hex", "-m", "lenient", "48 65 6C")
        assert (code, out) == (0, "Hel")

    def test_dec_json(self, capsys):
        doc = run_json(capsys, "dec", "-c", "hex", "00ff")
        assert doc == {
            "codec": "base16lower",
            "ok": True,
            "length": 2,
            "hex": "00ff",
            "text": None,
            "error": None,
        }

    def test_dec_all(self, capsys):
        doc = run_json(capsys, "dec", "--all", "SGVsbG8")
        names = [r["codec"] for r in doc["results"]]
        assert names[0] == "base64"
        assert all(r["ok"] for r in doc["results"])

    def test_dec_all_nothing_decodes(self, capsys):
        code, _, err = run(capsys, "dec", "--all", "☃")
        assert code == 10
        assert "No codec decodes" in err

    def test_conv(self, capsys):
        code, out, _ = run(capsys, "conv", "--from", "base64", "--to", "hex", "SGVsbG8")
        assert (code, out) == (0, "48656c6c6f\n")


# =========================================================================
# Exit codes
# =========================================================================

class TestExitCodes:
    def test_invalid_character(self, capsys):
        code, _, err = run(capsys, "dec", "-c", "base64", "SGVsbG8=")
        assert code == 10
        assert "invalid character '='" in err

    def test_checksum(self, capsys):
        assert run(capsys, "dec", "-c", "bubblebabble", "xaxax")[0] == 11

    def test_io_error(self, capsys, tmp_path):
        missing = tmp_path / "missing.txt"
        assert run(capsys, "dec", "-i", "@{}".format(missing))[0] == 12

    def test_unknown_codec(self, capsys):
        code, _, err = run(capsys, "dec", "-c", "base1000", "abc")
        assert code == 13
        assert "unknown codec: base1000" in err

    def test_no_command(self, capsys):
        assert run(capsys)[0] == 1

    def test_mapping(self):
        assert exit_code_for(ChecksumMismatch()) == 11
        assert exit_code_for(IoError(OSError("disk"))) == 12
        assert exit_code_for(CodecNotFound("x")) == 13
        assert exit_code_for(InvalidCharacter("x", 0)) == 10
        assert exit_code_for(InvalidInput("x")) == 10
        assert exit_code_for(MbaseError("x")) == 1


# =========================================================================
# list / info / verify / fmt
# =========================================================================

class TestCatalogCommands:
    def test_list_json(self, capsys):
        doc = run_json(capsys, "list")
        schema = load_schema("codec_meta")
        assert doc["count"] == 54
        assert len(doc["codecs"]) == 54
        for meta in doc["codecs"]:
            jsonschema.validate(meta, schema)

    def test_list_text(self, capsys):
        code, out, _ = run(capsys, "list")
        assert code == 0
        assert out.splitlines()[0].startswith("base64 ")

    def test_info_json(self, capsys):
        doc = run_json(capsys, "info", "b58")
        jsonschema.validate(doc, load_schema("codec_meta"))
        assert doc["name"] == "base58btc"
        assert doc["multibase_code"] == "z"
        assert doc["case_sensitivity"] == "sensitive"

    def test_info_text(self, capsys):
        code, out, _ = run(capsys, "info", "uu")
        assert code == 0
        assert "name:             uuencode" in out
        assert "\\x0a (65 symbols)" in out


class TestVerify:
    def test_valid(self, capsys):
        doc = run_json(capsys, "verify", "-c", "bech32", "a12uel5l")
        jsonschema.validate(doc, load_schema("verify_result"))
        assert doc["valid"] is True
        assert doc["error"] is None

    def test_invalid_json_exits_with_mapped_code(self, capsys):
        code, out, _ = run(capsys, "verify", "-c", "bech32", "a1lqfn3a", "--json")
        assert code == 11
        doc = json.loads(out)
        jsonschema.validate(doc, load_schema("verify_result"))
        assert doc["valid"] is False
        assert "checksum" in doc["error"]

    def test_text(self, capsys):
        assert run(capsys, "verify", "-c", "hex", "abc")[:2] == (
            10, "invalid: invalid length 3: expected a multiple of 2 (incomplete final group)\n",
        )


class TestFmt:
    def test_group(self, capsys):
        code, out, _ = run(capsys, "fmt", "-c", "hex", "--group", "4", "DEAD BEEF")
        assert (code, out) == (0, "dead beef\n")

    def test_wrap_to_file(self, capsys, tmp_path):
        target = tmp_path / "out.txt"
        code, out, _ = run(capsys, "fmt", "-c", "hex", "--wrap", "4", "-o", "@{}".format(target), "deadbeef")
        assert (code, out) == (0, "")
        assert target.read_text() == "dead\nbeef"


# =========================================================================
# detect / explain
# =========================================================================

class TestDetectExplain:
    def test_detect_json(self, capsys):
        doc = run_json(capsys, "detect", "--top", "3", "SGVsbG8")
        jsonschema.validate(doc, load_schema("detect_result"))
        for candidate in doc["candidates"]:
            jsonschema.validate(candidate, load_schema("detect_candidate"))
        assert len(doc["candidates"]) == 3
        assert doc["candidates"][0]["codec"] == "base64"
        assert doc["input_preview"] == "SGVsbG8"

    def test_detect_text(self, capsys):
        code, out, _ = run(capsys, "detect", "--top", "1", "f48656c6c6f")
        assert code == 0
        assert out.startswith(" 1. base16lower")
        assert "0.95" in out

    def test_detect_all_with_workers(self, capsys):
        doc = run_json(capsys, "detect", "--top", "0", "--workers", "4", "--include-zero", "SGVsbG8")
        assert len(doc["candidates"]) == 54

    def test_explain_json(self, capsys):
        doc = run_json(capsys, "explain", "-c", "base64", "SGVsbG8=")
        jsonschema.validate(doc, load_schema("explain_result"))
        assert doc["valid"] is False
        assert doc["error"]["type"] == "InvalidCharacter"
        assert doc["error"]["position"] == 7
        assert doc["suggestions"] == [
            "Padding character found; try a padded variant like base64pad",
        ]

    def test_explain_agrees_with_verify_on_leading_space(self, capsys):
        assert run(capsys, "verify", "-c", "base64", " SGVsbG8")[0] == 10
        doc = run_json(capsys, "explain", "-c", "base64", "-m", "strict", " SGVsbG8")
        assert doc["valid"] is False
        assert doc["error"]["position"] == 0

    def test_explain_always_exits_zero(self, capsys):
        code, out, _ = run(capsys, "explain", "-c", "hex", "0xab")
        assert code == 0
        assert "valid: no" in out
        assert "remove it before decoding" in out


# =========================================================================
# Streams, parser and config
# =========================================================================

class TestStreams:
    def test_read_literal_and_file(self, tmp_path):
        path = tmp_path / "in.bin"
        path.write_bytes(b"\x00\x01")
        assert read_input("héllo") == "héllo".encode("utf-8")
        assert read_input("@{}".format(path)) == b"\x00\x01"

    def test_read_stdin_stream(self):
        assert read_input("-", io.BytesIO(b"abc")) == b"abc"

    def test_literal_that_looks_like_a_path_warns(self, tmp_path, caplog):
        path = tmp_path / "payload"
        path.write_bytes(b"file contents")
        with caplog.at_level(logging.WARNING, logger="mbase.streams"):
            assert read_input(str(path)) == str(path).encode("utf-8")
            assert read_input("notes.txt") == b"notes.txt"
        assert len(caplog.records) == 2
        assert "use @{}".format(path) in caplog.records[0].getMessage()

    def test_plain_literal_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mbase.streams"):
            read_input("SGVsbG8/d29ybGQ")
            read_input("hello world.txt")
        assert caplog.records == []

    def test_bare_output_path_is_a_file(self, capsys, tmp_path):
        target = tmp_path / "out.txt"
        code, out, _ = run(capsys, "enc", "-c", "hex", "-o", str(target), "Hi")
        assert (code, out) == (0, "")
        assert target.read_text() == "4869"

    def test_write_output_rejects_lone_at(self):
        with pytest.raises(InvalidInput):
            write_output("@", b"x")

    def test_file_input_encodes(self, capsys, tmp_path):
        path = tmp_path / "in.bin"
        path.write_bytes(b"\xff\x00")
        code, out, _ = run(capsys, "enc", "-c", "hex", "-i", "@{}".format(path))
        assert (code, out) == (0, "ff00\n")

    def test_hex_preview(self):
        assert hex_preview(b"AB\x00") == "00000000  41 42 00{}  |AB.|".format(" " * 39)
        assert hex_preview(bytes(300)).endswith("... (300 bytes total)")


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["fmt", "x"])
        assert args.mode == "lenient"
        assert args.input == "-"
        assert args.out == "-"
        args = build_parser().parse_args(["dec", "x"])
        assert args.mode == "strict"

    def test_invalid_mode_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["dec", "-m", "sloppy", "x"])
        assert exc.value.code == 2


class TestConfig:
    def test_int_env(self, monkeypatch):
        monkeypatch.setenv("MBASE_TEST_SETTING", "7")
        assert config._int_env("MBASE_TEST_SETTING", 5) == 7

    @pytest.mark.parametrize("raw", ["", "seven", "-1"])
    def test_int_env_fallback(self, monkeypatch, raw):
        monkeypatch.setenv("MBASE_TEST_SETTING", raw)
        assert config._int_env("MBASE_TEST_SETTING", 5) == 5
