import builtins
import sys
from pathlib import Path

import pytest


# Ensure 'src/' is on sys.path so 'dart_tr' can be imported when running tests from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def chdir_tmp(tmp_path, monkeypatch):
    """切到临时目录执行（避免污染仓库）。"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def patch_inputs(monkeypatch):
    """按顺序喂给 input() 的回答。"""
    def _patch(inputs):
        it = iter(inputs)
        monkeypatch.setattr(builtins, "input", lambda _prompt="": next(it))
    return _patch


@pytest.fixture
def write_dart():
    """write_dart(root, "lib/screens/a.dart", text) -> Path"""
    def _write(root: Path, rel: str, text: str) -> Path:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _write
