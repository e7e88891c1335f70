from __future__ import annotations

import os
from pathlib import Path

import pytest

from stdpkgs import walker
from stdpkgs.models import StdPkg
from stdpkgs.walker import is_ignored, walk_roots


@pytest.mark.parametrize(
    "name, ignored",
    [
        ("fmt", False),
        ("http", False),
        ("_asm", False),
        ("internal", False),
        ("testdata", True),
        (".git", True),
        (".hidden", True),
        ("v1", False),
        ("1.2", True),
        ("9p", True),
        ("0", True),
        ("", True),
        ("testdata2", False),
    ],
)
def test_is_ignored(name: str, ignored: bool) -> None:
    assert is_ignored(name) is ignored


def test_walk_roots_collects_packages_by_base_name(tmp_path: Path, make_tree) -> None:
    root = make_tree(tmp_path / "src", ["fmt", "net/http", "vendor/v1", "vendor/2fa"])

    index = walk_roots([root])

    assert set(index) == {"fmt", "net", "http", "vendor", "v1"}
    assert index["fmt"] == [StdPkg(path="fmt", dir=str(root / "fmt"))]
    assert index["http"] == [StdPkg(path="net/http", dir=str(root / "net" / "http"))]
    assert index["v1"] == [StdPkg(path="vendor/v1", dir=str(root / "vendor" / "v1"))]
    assert "2fa" not in index


def test_walk_roots_skips_dot_digit_and_testdata_subtrees(goroot: Path) -> None:
    index = walk_roots([goroot / "src"])

    recorded_paths = {record.path for records in index.values() for record in records}
    assert "net/http/testdata" not in recorded_paths
    assert "testdata" not in index
    assert ".git" not in index
    assert "objects" not in index
    assert "net/http/httptest" in recorded_paths
    assert "vendor/golang.org/x/net" in recorded_paths
    assert not any("/." in path or path.startswith(".") for path in recorded_paths)


def test_walk_roots_skips_ignored_top_level_dirs(tmp_path: Path, make_tree) -> None:
    root = make_tree(tmp_path / "src", ["testdata/inner", ".cache/pkg", "1x/deep", "os"])

    index = walk_roots([root])

    assert set(index) == {"os"}


def test_walk_roots_groups_shared_base_names(tmp_path: Path, make_tree) -> None:
    root = make_tree(tmp_path / "src", ["a/util", "b/util", "c/d/util"])

    index = walk_roots([root])

    assert [record.path for record in index["util"]] == ["a/util", "b/util", "c/d/util"]
    assert len({record.dir for record in index["util"]}) == 3


def test_walk_roots_ignores_plain_files_and_symlinks(tmp_path: Path, make_tree) -> None:
    root = make_tree(tmp_path / "src", ["io/fs"])
    (root / "README").write_text("not a package", encoding="utf-8")
    outside = make_tree(tmp_path / "elsewhere", ["loop"])
    os.symlink(outside, root / "io" / "linked", target_is_directory=True)

    index = walk_roots([root])

    assert set(index) == {"io", "fs"}


def test_walk_roots_is_deterministic(goroot: Path) -> None:
    first = walk_roots([goroot / "src"])
    second = walk_roots([goroot / "src"])

    assert first == second
    assert [record.path for record in first["net"]] == ["net", "vendor/golang.org/x/net"]


def test_walk_roots_resolves_relative_roots(
    tmp_path: Path, make_tree, monkeypatch: pytest.MonkeyPatch
) -> None:
    make_tree(tmp_path / "src", ["sort"])
    monkeypatch.chdir(tmp_path)

    index = walk_roots(["src"])

    assert index["sort"][0].dir == str(tmp_path / "src" / "sort")


def test_walk_roots_continues_past_unreadable_dirs(
    tmp_path: Path,
    make_tree,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    propagate_logs: None,
) -> None:
    root = make_tree(tmp_path / "src", ["crypto/aes", "crypto/locked/inner", "crypto/sha256", "zip"])
    locked = str(root / "crypto" / "locked")
    real_scandir = os.scandir

    def fake_scandir(path):
        if str(path) == locked:
            raise PermissionError(13, "Permission denied", locked)
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", fake_scandir)

    index = walk_roots([root])

    assert "locked" in index
    assert "inner" not in index
    assert {"aes", "sha256", "zip"} <= set(index)
    assert any("unreadable package dir" in message for message in caplog.messages)


def test_walk_roots_skips_missing_root(
    tmp_path: Path,
    make_tree,
    caplog: pytest.LogCaptureFixture,
    propagate_logs: None,
) -> None:
    good = make_tree(tmp_path / "good", ["strings"])

    index = walk_roots([tmp_path / "missing", good])

    assert set(index) == {"strings"}
    assert any("unreadable source root" in message for message in caplog.messages)
