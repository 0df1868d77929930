"""Tests for lnkreader.resolver."""

import posixpath

from lnkreader.resolver import is_absolute, resolve_target


def exists_in(*paths):
    known = set(paths)
    return known.__contains__


class TestResolveTarget:
    """Ordered fallback between the decoded path fragments."""

    def test_local_plus_suffix(self):
        result = resolve_target(
            "C:\\A\\", "b.txt", exists=exists_in("C:\\A\\b.txt"), pathmod=posixpath
        )
        assert result == "C:\\A\\b.txt"

    def test_absolute_local_when_concatenation_missing(self):
        result = resolve_target(
            "C:\\A\\", "b.txt", exists=exists_in("C:\\A\\"), pathmod=posixpath
        )
        assert result == "C:\\A\\"

    def test_relative_local_is_not_a_candidate(self):
        assert resolve_target("A", exists=lambda p: True, pathmod=posixpath) == ""

    def test_working_dir_join(self):
        result = resolve_target(
            "",
            "",
            "x/y",
            "/home/u",
            exists=exists_in("/home/u/x/y"),
            pathmod=posixpath,
        )
        assert result == "/home/u/x/y"

    def test_join_is_normalized(self):
        result = resolve_target(
            relative_path="../v/./f",
            working_dir="/home/u",
            exists=exists_in("/home/u/../v/./f"),
            pathmod=posixpath,
        )
        assert result == "/home/v/f"

    def test_net_plus_suffix(self):
        result = resolve_target(
            common_path_suffix="dir\\f.txt",
            net_name="\\\\srv\\share",
            exists=exists_in("\\\\srv\\share\\dir\\f.txt"),
            pathmod=posixpath,
        )
        assert result == "\\\\srv\\share\\dir\\f.txt"

    def test_net_name_alone(self):
        result = resolve_target(
            net_name="\\\\srv\\share",
            exists=exists_in("\\\\srv\\share"),
            pathmod=posixpath,
        )
        assert result == "\\\\srv\\share"

    def test_local_wins_over_network(self):
        result = resolve_target(
            "C:\\A\\",
            "b.txt",
            net_name="\\\\srv\\share",
            exists=lambda p: True,
            pathmod=posixpath,
        )
        assert result == "C:\\A\\b.txt"

    def test_nothing_exists(self):
        result = resolve_target(
            "C:\\A\\",
            "b.txt",
            "x",
            "/w",
            "\\\\srv\\share",
            exists=lambda p: False,
            pathmod=posixpath,
        )
        assert result == ""

    def test_no_fragments(self):
        assert resolve_target(exists=lambda p: True) == ""

    def test_tries_candidates_in_order(self):
        seen = []

        def record(path):
            seen.append(path)
            return False

        resolve_target(
            "C:\\A\\",
            "b",
            "r",
            "/w",
            "\\\\s\\x",
            exists=record,
            pathmod=posixpath,
        )
        assert seen == ["C:\\A\\b", "C:\\A\\", "/w/r", "\\\\s\\x\\b", "\\\\s\\x"]


class TestIsAbsolute:
    def test_forms(self):
        assert is_absolute("/usr/bin")
        assert is_absolute("C:\\Windows")
        assert is_absolute("\\\\srv\\share")
        assert not is_absolute("relative\\path")
        assert not is_absolute("")
