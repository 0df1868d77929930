"""Integration tests for the lnkreader CLI."""

import json
import subprocess
import sys

from lnkreader.cli import format_link, main
from lnkreader.parser import ShellLink


def run_cli(*args):
    """Run ``lnkreader`` as a subprocess and return CompletedProcess."""
    return subprocess.run(
        [sys.executable, "-m", "lnkreader", *args],
        capture_output=True,
        text=True,
        timeout=30,
    )


class TestUsage:
    """Invocation without a file."""

    def test_no_argument_exits_cleanly(self):
        result = run_cli()
        assert result.returncode == 0
        assert "Expected input file" in result.stderr
        assert result.stdout == ""

    def test_no_argument_in_process(self, capsys):
        main([])
        assert "usage:" in capsys.readouterr().err


class TestReadFile:
    """Reading a .lnk from disk."""

    def test_text_output(self, lnk_file):
        result = run_cli(str(lnk_file))
        assert result.returncode == 0
        out = result.stdout
        assert "Description: Google Chrome" in out
        assert r"Relative path: ..\..\..\Windows\notepad.exe" in out
        assert r"Working directory: C:\Windows" in out
        assert "Arguments: --flag two words value" in out
        assert "Icon index: -3" in out
        assert "Window show: maximized" in out
        assert "Hot key: CTRL+C" in out
        assert 'Volume: "Système" FIXED' in out
        assert "Resolve:" in out

    def test_json_output(self, lnk_file):
        result = run_cli(str(lnk_file), "--json")
        assert result.returncode == 0
        data = json.loads(result.stdout)
        assert data["description"] == "Google Chrome"
        assert data["arguments"] == ["--flag", "two words", "value"]
        assert data["short_name"] == "Chrome"
        assert data["show_command"] == "maximized"
        assert data["creation_time"].startswith("2020-01-01")
        assert data["write_time"] is None
        assert "HasName" in data["link_flags"]
        assert data["item_count"] == 2

    def test_verbose_logs_to_stderr(self, lnk_file):
        result = run_cli(str(lnk_file), "-v")
        assert result.returncode == 0
        assert "DEBUG lnkreader.parser" in result.stderr

    def test_missing_file(self, tmp_path):
        result = run_cli(str(tmp_path / "nope.lnk"))
        assert result.returncode == 1
        assert "error:" in result.stderr

    def test_malformed_file(self, tmp_path):
        bad = tmp_path / "bad.lnk"
        bad.write_bytes(b"\xff" * 80)
        result = run_cli(str(bad))
        assert result.returncode == 1
        assert "Invalid header size" in result.stderr

    def test_unknown_codepage(self, lnk_file):
        result = run_cli("--codepage", "nonsense", str(lnk_file))
        assert result.returncode == 2
        assert "Unknown code page" in result.stderr
        assert "Traceback" not in result.stderr

    def test_codepage_alias_accepted(self, lnk_file):
        result = run_cli("--codepage", "windows-1251", str(lnk_file))
        assert result.returncode == 0


class TestFormatLink:
    """The human-readable formatter."""

    def test_unc_fields(self, unc_lnk_bytes):
        text = format_link(ShellLink.from_bytes(unc_lnk_bytes))
        assert r"Network share: \\server\share" in text
        assert "Device name: Z:" in text
        assert "Volume:" not in text

    def test_no_hot_key(self, simple_lnk_bytes):
        text = format_link(ShellLink.from_bytes(simple_lnk_bytes))
        assert "Hot key: None" in text
        assert "Window show: normal" in text
