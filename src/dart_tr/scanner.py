from __future__ import annotations

import re
from typing import Callable, Dict, List

from .models import LiteralSpan

# 单/双引号字面量：非贪婪、引号自匹配、不识别转义（与旧脚本输出保持一致）
STRING_LITERAL_RE = re.compile(r"""(['"])(.*?)\1""")

Scanner = Callable[[str], List[LiteralSpan]]


def scan_literals(text: str) -> List[LiteralSpan]:
    """
    Regex scanner. A backslash-escaped quote still terminates the literal,
    and `.` never crosses a newline, so spans stay on one line.
    """
    return [
        LiteralSpan(start=m.start(), end=m.end(), quote=m.group(1), raw_value=m.group(2))
        for m in STRING_LITERAL_RE.finditer(text)
    ]


# lexer states
_NORMAL = 0
_SINGLE = 1
_DOUBLE = 2
_LINE_COMMENT = 3
_BLOCK_COMMENT = 4


def lex_literals(text: str) -> List[LiteralSpan]:
    """
    Character scanner with comment and escape awareness.

    - `// ...` and `/* ... */` (nested, as in Dart) are skipped
    - `\\'` inside a literal does not close it
    - triple-quoted strings are consumed but never reported
    - a literal still open at end of line is dropped
    raw_value is the source text between the quotes, escapes not decoded.
    """
    spans: List[LiteralSpan] = []
    n = len(text)
    i = 0
    state = _NORMAL
    start = 0
    depth = 0

    while i < n:
        c = text[i]

        if state == _NORMAL:
            if c == "/" and text.startswith("//", i):
                state = _LINE_COMMENT
                i += 2
                continue
            if c == "/" and text.startswith("/*", i):
                state = _BLOCK_COMMENT
                depth = 1
                i += 2
                continue
            if c in ("'", '"'):
                triple = c * 3
                if text.startswith(triple, i):
                    close = _find_triple_end(text, i + 3, triple)
                    i = n if close < 0 else close + 3
                    continue
                state = _SINGLE if c == "'" else _DOUBLE
                start = i
            i += 1
            continue

        if state in (_SINGLE, _DOUBLE):
            quote = "'" if state == _SINGLE else '"'
            if c == "\\":
                i += 2
                continue
            if c == "\n":
                state = _NORMAL
                i += 1
                continue
            if c == quote:
                spans.append(LiteralSpan(start=start, end=i + 1, quote=quote, raw_value=text[start + 1:i]))
                state = _NORMAL
            i += 1
            continue

        if state == _LINE_COMMENT:
            if c == "\n":
                state = _NORMAL
            i += 1
            continue

        # _BLOCK_COMMENT
        if text.startswith("/*", i):
            depth += 1
            i += 2
            continue
        if text.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                state = _NORMAL
            continue
        i += 1

    return spans


def _find_triple_end(text: str, pos: int, triple: str) -> int:
    n = len(text)
    while pos < n:
        if text[pos] == "\\":
            pos += 2
            continue
        if text.startswith(triple, pos):
            return pos
        pos += 1
    return -1


SCANNERS: Dict[str, Scanner] = {
    "regex": scan_literals,
    "lexer": lex_literals,
}


def get_scanner(name: str) -> Scanner:
    try:
        return SCANNERS[name]
    except KeyError:
        raise ValueError(f"未知 scanner：{name!r}，可选：{', '.join(SCANNERS)}") from None
