from __future__ import annotations

import re
from typing import List, Optional, Pattern, Sequence

from .classifier import TR_SUFFIX, classify_all
from .models import (
    ClassificationResult,
    CopyUntouched,
    RewriteOutcome,
    RewritePlan,
    RewriteRules,
    Segment,
    Substitute,
)
from .registry import StringRegistry
from .scanner import get_scanner

_IMPORT_TOKEN_RE = re.compile(r"""(\s+|['"]|;)""")


def escape_single_quotes(value: str) -> str:
    """
    `'` -> `\\'`，已转义的保持不变。
    前面连续反斜杠为偶数个时（如 `\\\\'`）引号仍是裸的，需要转义。
    """
    out: List[str] = []
    backslashes = 0
    for c in value:
        if c == "'" and backslashes % 2 == 0:
            out.append("\\")
        out.append(c)
        backslashes = backslashes + 1 if c == "\\" else 0
    return "".join(out)


def build_replacement(value: str, *, terminator: str = "", escape_quotes: bool = False) -> str:
    """
    'value'.tr()  (+ terminator)

    Without escape_quotes a value containing `'` produces broken Dart,
    which is what the old scripts did as well.
    """
    if escape_quotes:
        value = escape_single_quotes(value)
    return f"'{value}'{TR_SUFFIX}{terminator}"


def build_plan(
        text: str,
        results: Sequence[ClassificationResult],
        *,
        terminator: str = "",
        escape_quotes: bool = False,
) -> RewritePlan:
    segments: List[Segment] = []
    last = 0
    for r in results:
        if not r.eligible:
            continue
        span = r.span
        if span.start > last:
            segments.append(CopyUntouched(last, span.start))
        replacement = build_replacement(span.raw_value, terminator=terminator, escape_quotes=escape_quotes)
        segments.append(Substitute(span=span, replacement=replacement))
        last = span.end
    if last < len(text) or not segments:
        segments.append(CopyUntouched(last, len(text)))
    return RewritePlan(length=len(text), segments=tuple(segments))


def render_plan(text: str, plan: RewritePlan) -> str:
    parts: List[str] = []
    for seg in plan.segments:
        if isinstance(seg, Substitute):
            parts.append(seg.replacement)
        else:
            parts.append(text[seg.start:seg.end])
    return "".join(parts)


def import_pattern(required_import: str) -> Pattern[str]:
    """
    `import 'package:x/x.dart';` -> 任意空白、任一种引号、`;` 前可有空白。
    """
    parts: List[str] = []
    for chunk in _IMPORT_TOKEN_RE.split(required_import.strip()):
        if not chunk:
            continue
        if chunk.isspace():
            parts.append(r"\s+")
        elif chunk in ("'", '"'):
            parts.append(r"""['"]""")
        elif chunk == ";":
            parts.append(r"\s*;")
        else:
            parts.append(re.escape(chunk))
    return re.compile("".join(parts))


def has_import(text: str, required_import: str) -> bool:
    return import_pattern(required_import).search(text) is not None


def rewrite_buffer(
        text: str,
        rules: RewriteRules,
        registry: Optional[StringRegistry] = None,
) -> RewriteOutcome:
    """
    Scan, classify and rewrite one buffer.

    Text outside eligible spans is copied verbatim. With at least one
    substitution the required import is prepended (plus a blank line)
    unless the buffer already has it. With none the text is returned as is.
    """
    spans = get_scanner(rules.scanner)(text)
    results = classify_all(text, spans, rules.call_sites)
    plan = build_plan(text, results, terminator=rules.terminator, escape_quotes=rules.escape_quotes)

    subs = plan.substitutions
    if not subs:
        return RewriteOutcome(new_text=text, results=tuple(results))

    values = frozenset(s.span.raw_value for s in subs)
    if registry is not None:
        for s in subs:
            registry.add(s.span.raw_value)

    new_text = render_plan(text, plan)
    import_added = False
    if not has_import(text, rules.required_import):
        new_text = f"{rules.required_import}\n\n{new_text}"
        import_added = True

    return RewriteOutcome(
        new_text=new_text,
        substitutions=len(subs),
        import_added=import_added,
        values=values,
        results=tuple(results),
    )
