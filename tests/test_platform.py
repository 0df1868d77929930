"""Tests for lnkreader._platform."""

import pytest

from lnkreader._platform import (
    IDENTITY_PLATFORM,
    PlatformServices,
    split_windows_command_line,
)


class TestSplitCommandLine:
    """CommandLineToArgvW-style tokenizing."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", []),
            ("a b  c", ["a", "b", "c"]),
            ('--flag "two words" value', ["--flag", "two words", "value"]),
            (r'"a\"b"', ['a"b']),
            (r'a\\\\"b c"', [r"a\\b c"]),
            (r"C:\dir\ x", ["C:\\dir\\", "x"]),
            ('""', [""]),
            ('"a""b"', ['a"b']),
        ],
    )
    def test_split(self, text, expected):
        assert split_windows_command_line(text) == expected

    def test_identity_splits_on_whitespace(self):
        assert IDENTITY_PLATFORM.split_command_line('"a b" c') == ['"a', 'b"', "c"]


class TestDecodeAnsi:
    """Legacy code-page conversion."""

    def test_ascii_fast_path(self):
        assert PlatformServices().decode_ansi(b"C:\\Windows") == "C:\\Windows"

    def test_cp1252(self):
        assert PlatformServices().decode_ansi(b"caf\xe9") == "café"

    def test_other_codepage(self):
        svc = PlatformServices(ansi_codepage="cp1251")
        assert svc.decode_ansi(b"\xcf\xf3\xf2\xfc") == "Путь"

    def test_unknown_codepage_rejected(self):
        with pytest.raises(ValueError, match="Unknown code page"):
            PlatformServices(ansi_codepage="nonsense")


class TestHashable:
    """Services can key a cache or sit in a set."""

    def test_hash(self):
        assert hash(PlatformServices()) == hash(PlatformServices(environ={}))

    def test_set_membership(self):
        assert len({PlatformServices(), PlatformServices(), IDENTITY_PLATFORM}) == 2


class TestExpandEnvironment:
    """%VAR% expansion for icon paths."""

    def test_expands_known(self):
        svc = PlatformServices(environ={"ProgramFiles": r"C:\Program Files"})
        assert (
            svc.expand_environment(r"%PROGRAMFILES%\app.exe")
            == r"C:\Program Files\app.exe"
        )

    def test_unknown_left_alone(self):
        svc = PlatformServices(environ={})
        assert svc.expand_environment(r"%NOPE%\x.ico") == r"%NOPE%\x.ico"

    def test_identity_does_not_expand(self):
        assert IDENTITY_PLATFORM.expand_environment("%WINDIR%") == "%WINDIR%"
