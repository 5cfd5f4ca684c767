from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Optional

from .registry import StringRegistry


def build_translation_map(values: Iterable[str]) -> Dict[str, str]:
    # sorted() 按 code point 排序，与 locale 无关
    return {v: v for v in sorted(set(values))}


def dumps_translation_map(mapping: Dict[str, str]) -> str:
    return json.dumps(mapping, ensure_ascii=False, indent=2) + "\n"


def write_translation_document(registry: StringRegistry, path: Path) -> Optional[Path]:
    """
    写出 {value: value} 文档；registry 为空时什么都不写，返回 None。
    """
    if not registry:
        return None
    mapping = build_translation_map(registry.values())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_translation_map(mapping), encoding="utf-8")
    return path
