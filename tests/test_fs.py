from __future__ import annotations

from pathlib import Path

import pytest

from dart_tr.fs import is_path_included, iter_dart_files, missing_include_dirs


@pytest.fixture
def lib(tmp_path, write_dart):
    for rel in [
        "lib/main.dart",
        "lib/core/c.dart",
        "lib/core/widgets/b.dart",
        "lib/screens/a.dart",
        "lib/screens/X.DART",
        "lib/screens2/z.dart",
    ]:
        write_dart(tmp_path, rel, "")
    (tmp_path / "lib" / "screens" / "readme.md").write_text("x", encoding="utf-8")
    return tmp_path / "lib"


def _rel(paths, base):
    return [p.relative_to(base).as_posix() for p in paths]


def test_all_dart_files_depth_first_sorted(lib):
    assert _rel(iter_dart_files(lib), lib) == [
        "core/c.dart",
        "core/widgets/b.dart",
        "main.dart",
        "screens/X.DART",
        "screens/a.dart",
        "screens2/z.dart",
    ]


def test_include_dirs_limit_scope_and_reach_nested_dirs(lib):
    assert _rel(iter_dart_files(lib, ["screens", "core/widgets"]), lib) == [
        "core/widgets/b.dart",
        "screens/X.DART",
        "screens/a.dart",
    ]


def test_is_path_included(lib):
    assert is_path_included(lib / "screens" / "a.dart", lib, ["screens"])
    assert not is_path_included(lib / "screens2" / "z.dart", lib, ["screens"])
    assert not is_path_included(lib, lib, ["screens"])
    assert is_path_included(lib / "main.dart", lib, [])


def test_missing_include_dirs(lib):
    assert missing_include_dirs(lib, ["screens", "nope"]) == [lib / "nope"]


def test_unreadable_directory_is_reported_and_skipped(lib, monkeypatch, capsys):
    blocked = lib / "core"
    real_iterdir = Path.iterdir

    def iterdir(self):
        if self == blocked:
            raise PermissionError(13, "Permission denied")
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)
    assert _rel(iter_dart_files(lib), lib) == [
        "main.dart",
        "screens/X.DART",
        "screens/a.dart",
        "screens2/z.dart",
    ]
    out = capsys.readouterr().out
    assert f"❌ {blocked}" in out
    assert "Permission denied" in out
