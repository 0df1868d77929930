"""Shared fixtures for lnkreader tests."""

import pytest

from lnkdata import FILETIME_2020, build_lnk, link_info, network_link, volume


@pytest.fixture
def simple_lnk_bytes():
    """A minimal .lnk targeting notepad.exe through a local path."""
    return build_lnk(
        id_items=[b"\x1f\x50" + b"\x00" * 16],
        info=link_info(
            volume=volume("SYSTEM"),
            local=r"C:\Windows\notepad.exe",
            suffix="",
        ),
    )


@pytest.fixture
def full_lnk_bytes():
    """A feature-rich .lnk with all optional fields populated."""
    return build_lnk(
        id_items=[b"\x1f\x50" + b"\x00" * 16, b"\x2fC:\\\x00"],
        info=link_info(
            volume=volume("Système", unicode=True),
            local=r"C:\Windows",
            suffix="notepad.exe",
            local_unicode="C:\\Windows\\",
            suffix_unicode="notepad.exe",
        ),
        description="Google Chrome",
        relative_path=r"..\..\..\Windows\notepad.exe",
        working_dir=r"C:\Windows",
        arguments='--flag "two words" value',
        icon_location=r"%ProgramFiles%\Google\Chrome\Application\chrome.exe",
        times=(FILETIME_2020, FILETIME_2020, 0),
        file_size=201216,
        icon_index=-3,
        show_command=3,
        hot_key=0x0243,
    )


@pytest.fixture
def unc_lnk_bytes():
    """A .lnk targeting a UNC path."""
    return build_lnk(
        info=link_info(
            network=network_link(r"\\server\share", "Z:"),
            suffix=r"folder\file.txt",
        ),
    )


@pytest.fixture
def lnk_file(tmp_path, full_lnk_bytes):
    """*full_lnk_bytes* written to disk as ``Chrome.lnk``."""
    path = tmp_path / "Chrome.lnk"
    path.write_bytes(full_lnk_bytes)
    return path
