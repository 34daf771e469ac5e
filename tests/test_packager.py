"""Tests for packaging directory trees into zip archives."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from dirwalk import list_entries, package_directories


def _make_tree(root: Path) -> None:
    (root / "Main.class").write_text("main")
    pkg = root / "com" / "example"
    pkg.mkdir(parents=True)
    (pkg / "Handler.class").write_text("handler")
    cache = root / "tools" / "__pycache__"
    cache.mkdir(parents=True)
    (cache / "x.cpython-312.pyc").write_text("bytecode")
    (root / "tools" / "x.py").write_text("print('x')\n")


def test_list_entries_uses_relative_posix_names(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    entries = list_entries(tmp_path)
    assert sorted(entries) == ["Main.class", "com/example/Handler.class", "tools/x.py"]


def test_list_entries_walker_order(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    entries = list_entries(tmp_path)
    assert entries[0] == "Main.class"
    assert entries.index("tools/x.py") < entries.index("com/example/Handler.class")


def test_list_entries_explicit_exclude_replaces_defaults(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    entries = list_entries(tmp_path, exclude=["*.class"])
    assert sorted(entries) == ["tools/__pycache__/x.cpython-312.pyc", "tools/x.py"]


def test_list_entries_no_exclusions(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    assert len(list_entries(tmp_path, exclude=[])) == 4


def test_ignore_file_adds_patterns(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    (tmp_path / ".dirwalkignore").write_text("# comment\ntools/\n")
    entries = list_entries(tmp_path)
    assert sorted(entries) == ["Main.class", "com/example/Handler.class"]


def test_list_entries_missing_root(tmp_path: Path) -> None:
    assert list_entries(tmp_path / "missing") == []


def test_package_directories(tmp_path: Path) -> None:
    root = tmp_path / "classes"
    root.mkdir()
    _make_tree(root)
    output = tmp_path / "out" / "app.zip"

    result = package_directories([root], output)

    assert result.output == output
    assert sorted(result.entries) == ["Main.class", "com/example/Handler.class", "tools/x.py"]
    assert result.skipped == ["tools/__pycache__/x.cpython-312.pyc"]
    with zipfile.ZipFile(output) as zf:
        assert sorted(zf.namelist()) == sorted(result.entries)
        assert zf.read("com/example/Handler.class") == b"handler"
        assert zf.getinfo("Main.class").compress_type == zipfile.ZIP_DEFLATED


def test_package_multiple_roots_first_wins(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "app.properties").write_text("first")
    (second / "app.properties").write_text("second")
    (second / "extra.txt").write_text("extra")
    output = tmp_path / "app.zip"

    result = package_directories([first, second], output)

    assert sorted(result.entries) == ["app.properties", "extra.txt"]
    assert result.skipped == ["app.properties"]
    with zipfile.ZipFile(output) as zf:
        assert zf.read("app.properties") == b"first"


def test_package_skips_output_inside_root(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a")
    output = tmp_path / "app.zip"
    output.write_bytes(b"stale")

    result = package_directories([tmp_path], output)

    assert result.entries == ["a.txt"]
    with zipfile.ZipFile(output) as zf:
        assert zf.namelist() == ["a.txt"]


def test_package_stored_compression(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("a")
    output = tmp_path / "app.zip"
    package_directories([root], output, compression="stored")
    with zipfile.ZipFile(output) as zf:
        assert zf.getinfo("a.txt").compress_type == zipfile.ZIP_STORED


def test_package_unknown_compression(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unknown compression"):
        package_directories([tmp_path], tmp_path / "app.zip", compression="lzma9")


def test_package_empty_root(tmp_path: Path) -> None:
    root = tmp_path / "empty"
    root.mkdir()
    output = tmp_path / "app.zip"
    result = package_directories([root], output)
    assert result.entries == []
    with zipfile.ZipFile(output) as zf:
        assert zf.namelist() == []


def test_dangling_symlink_is_skipped(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("a")
    (root / "dangling").symlink_to(root / "gone")
    output = tmp_path / "app.zip"

    assert list_entries(root) == ["a.txt"]
    result = package_directories([root], output)

    assert result.entries == ["a.txt"]
    assert result.skipped == ["dangling"]
    with zipfile.ZipFile(output) as zf:
        assert zf.namelist() == ["a.txt"]


def test_symlinked_file_is_packaged(tmp_path: Path) -> None:
    target = tmp_path / "target.txt"
    target.write_text("linked")
    root = tmp_path / "root"
    root.mkdir()
    (root / "link.txt").symlink_to(target)
    output = tmp_path / "app.zip"

    result = package_directories([root], output)

    assert result.entries == ["link.txt"]
    with zipfile.ZipFile(output) as zf:
        assert zf.read("link.txt") == b"linked"
