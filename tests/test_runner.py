"""
RUNNER VERIFICATION SUITE - Receipts & CLI

Coverage:
  ✓ Demo output for "hello, world"
  ✓ --text with explicit encoding
  ✓ File and stdin digests, sha256sum-style lines
  ✓ Receipts payload (length, blocks, padding path, digest)
  ✓ --determinism-check double run
  ✓ Error exits: missing file, unknown encoding, read fault
  ✓ stdin streamed in block-sized reads; read faults exit 1
  ✓ --encoding rejected with files
"""

import io
import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from r30hash.runner import (
    main,
    digest_entry,
    digest_receipts,
    digest_receipts_checked,
    text_source,
    file_source,
    stdin_source,
)


HELLO_WORLD = "b91956bc1e5b1937b48c364b199ca70879c32cc22da67e3ff8411aea894c3d9f"


class BrokenStream:
    def read(self, n=-1):
        raise OSError("bad sector")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


# ═══════════════════════════════════════════════════════════════════════
# Test 1: Receipts
# ═══════════════════════════════════════════════════════════════════════

def test_digest_entry_fields():
    label, opener = text_source("hello, world", "ascii")
    entry = digest_entry(label, opener)
    assert entry == {
        "label": "hello, world",
        "length": 12,
        "blocks": 1,
        "padding_path": "embedded",
        "digest": HELLO_WORLD,
    }


def test_digest_entry_extra_block(tmp_path):
    path = tmp_path / "tail27.bin"
    path.write_bytes(b"z" * 59)
    entry = digest_entry(*file_source(str(path)))
    assert entry["length"] == 59
    assert entry["blocks"] == 3
    assert entry["padding_path"] == "extra_block"


def test_digest_receipts_double_run():
    sources = [text_source("hello, world", "ascii"), text_source("", "ascii")]
    result = digest_receipts_checked(sources)
    assert result["determinism.double_run_ok"] is True
    assert result["payload"]["source_count"] == 2
    assert result["payload"]["entries"][0]["digest"] == HELLO_WORLD
    assert result["section_hash"] == digest_receipts(sources).digest()["section_hash"]


# ═══════════════════════════════════════════════════════════════════════
# Test 2: CLI
# ═══════════════════════════════════════════════════════════════════════

def test_cli_demo(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out.strip()
    assert out == f'The R30 hash value for "hello, world" is: {HELLO_WORLD}'


def test_cli_text_with_encoding(capsys):
    assert main(["--text", "abc", "--encoding", "utf-8"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.endswith("4b101a87db8d6f12f11b418e984399914977ff6edde21755e155ce1855f60fd7")


def test_cli_files(tmp_path, capsys):
    a = tmp_path / "a.txt"
    a.write_bytes(b"hello, world")
    b = tmp_path / "b.txt"
    b.write_bytes(b"abc")
    assert main([str(a), str(b)]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == f"{HELLO_WORLD}  {a}"
    assert lines[1].startswith("4b101a87")


def test_cli_stdin(monkeypatch, capsys):
    fake_stdin = io.TextIOWrapper(io.BytesIO(b"hello, world"))
    monkeypatch.setattr(sys, "stdin", fake_stdin)
    assert main(["-"]) == 0
    assert capsys.readouterr().out.strip() == f"{HELLO_WORLD}  -"


def test_cli_receipts_json(tmp_path, capsys):
    out_path = tmp_path / "receipts.json"
    assert main(["--receipts", "--determinism-check", "--output", str(out_path)]) == 0
    result = json.loads(out_path.read_text())
    assert result["determinism.double_run_ok"] is True
    assert result["payload"]["entries"][0]["digest"] == HELLO_WORLD
    assert "Results written to" in capsys.readouterr().out


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.bin")]) == 1
    assert "Error" in capsys.readouterr().err


def test_cli_unknown_encoding(capsys):
    assert main(["--text", "abc", "--encoding", "no-such-codec"]) == 1
    assert "Unknown encoding" in capsys.readouterr().err


def test_cli_text_and_files_conflict(capsys):
    assert main(["--text", "abc", "file.bin"]) == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_cli_read_fault(monkeypatch, capsys):
    import r30hash.runner as runner

    monkeypatch.setattr(
        runner, "file_source", lambda path: (path, lambda: BrokenStream())
    )
    assert main(["broken.bin"]) == 1
    assert "bad sector" in capsys.readouterr().err


def test_cli_encoding_with_files_rejected(tmp_path, capsys):
    path = tmp_path / "hello.txt"
    path.write_bytes(b"hello, world")
    assert main(["--encoding", "utf-16", str(path)]) == 1
    err = capsys.readouterr().err
    assert "--encoding only applies to --text" in err


# ═══════════════════════════════════════════════════════════════════════
# STDIN HANDLING
# ═══════════════════════════════════════════════════════════════════════

class FakeStdin:
    """Stand-in for sys.stdin exposing only .buffer."""

    def __init__(self, buffer):
        self.buffer = buffer


class RecordingStream:
    """Binary stream that records every requested read size."""

    def __init__(self, data: bytes):
        self._inner = io.BytesIO(data)
        self.requests = []

    def read(self, n=-1):
        self.requests.append(n)
        return self._inner.read(n)


class FaultyStdinStream:
    def read(self, n=-1):
        raise OSError("stdin device error")


@pytest.mark.parametrize("extra", [[], ["--determinism-check"]])
def test_cli_stdin_read_fault(monkeypatch, capsys, extra):
    monkeypatch.setattr(sys, "stdin", FakeStdin(FaultyStdinStream()))
    assert main(extra + ["-"]) == 1
    assert "stdin device error" in capsys.readouterr().err


def test_cli_stdin_streamed_in_blocks(monkeypatch, capsys):
    stream = RecordingStream(b"x" * 1000)
    monkeypatch.setattr(sys, "stdin", FakeStdin(stream))
    assert main(["-"]) == 0

    # Never a read-everything call; each read asks for at most one block
    assert stream.requests
    assert all(0 < n <= 32 for n in stream.requests)
    line = capsys.readouterr().out.strip()
    assert line.endswith("  -")


def test_cli_stdin_determinism_check_reads_once(monkeypatch, capsys):
    stream = RecordingStream(b"hello, world")
    monkeypatch.setattr(sys, "stdin", FakeStdin(stream))
    assert main(["--determinism-check", "-"]) == 0
    assert capsys.readouterr().out.strip() == f"{HELLO_WORLD}  -"

    # Both runs digest the same bytes; stdin itself is consumed once
    assert stream.requests[0] == -1
    assert stream.requests.count(-1) == 1


def test_stdin_source_leaves_stdin_open(monkeypatch):
    buffer = io.BytesIO(b"hello, world")
    monkeypatch.setattr(sys, "stdin", FakeStdin(buffer))
    entry = digest_entry(*stdin_source())
    assert entry["digest"] == HELLO_WORLD
    assert not buffer.closed
