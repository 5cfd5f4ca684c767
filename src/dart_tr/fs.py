from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Sequence

SEARCH_DIR = "lib"
DART_SUFFIX = ".dart"


def _norm(p: str) -> str:
    return os.path.normpath(p)


def is_path_included(path: Path, search_dir: Path, include_dirs: Sequence[str]) -> bool:
    """
    规则：
    - include_dirs 为空：search_dir 下的所有文件
    - 否则：相对 search_dir 的路径等于某个 include dir，或以 "<dir>/" 开头
    - search_dir 本身不算（除非 include_dirs 为空）
    """
    file_path = _norm(str(path))
    base = _norm(str(search_dir))

    if not include_dirs:
        return file_path == base or file_path.startswith(base + os.sep)

    if file_path == base:
        return False

    rel = os.path.relpath(file_path, base)
    for d in include_dirs:
        nd = _norm(d)
        if rel == nd or rel.startswith(nd + os.sep):
            return True
    return False


def iter_dart_files(search_dir: Path, include_dirs: Sequence[str] = ()) -> Iterator[Path]:
    """
    深度优先遍历 search_dir；同级按名称排序，保证结果可复现。
    只进入 search_dir 本身或被 include 的目录（以及 include 目录的祖先）。
    """
    yield from _walk(search_dir, search_dir, list(include_dirs))


def _walk(current: Path, search_dir: Path, include_dirs: List[str]) -> Iterator[Path]:
    try:
        entries = sorted(current.iterdir(), key=lambda p: p.name)
    except OSError as e:
        # 单个目录读不了：报告后继续处理同级的其它目录
        print(f"❌ {current}: {e}")
        return
    for entry in entries:
        if entry.is_dir():
            if _should_descend(entry, search_dir, include_dirs):
                yield from _walk(entry, search_dir, include_dirs)
        elif entry.is_file() and entry.suffix.lower() == DART_SUFFIX:
            if is_path_included(entry, search_dir, include_dirs):
                yield entry


def _should_descend(directory: Path, search_dir: Path, include_dirs: List[str]) -> bool:
    if is_path_included(directory, search_dir, include_dirs):
        return True
    # lib/core 需要进入，才能走到 lib/core/widgets
    rel = os.path.relpath(_norm(str(directory)), _norm(str(search_dir)))
    return any(_norm(d).startswith(rel + os.sep) for d in include_dirs)


def missing_include_dirs(search_dir: Path, include_dirs: Sequence[str]) -> List[Path]:
    return [search_dir / d for d in include_dirs if not (search_dir / d).is_dir()]


# newline="": 保留 \r\n 原样，避免改写未命中的区域
def read_text(path: Path) -> str:
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
