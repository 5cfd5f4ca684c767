from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import ClassificationResult, LiteralSpan, SkipReason

TR_SUFFIX = ".tr()"
IMPORT_PREFIX = "import "
DEFAULT_CALL_SITES = ("print", "log")


def _is_ident_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def is_within_import_line(text: str, index: int) -> bool:
    line_start = text.rfind("\n", 0, index) + 1
    line_end = text.find("\n", index)
    if line_end == -1:
        line_end = len(text)
    return text[line_start:line_end].lstrip().startswith(IMPORT_PREFIX)


def is_followed_by_tr(text: str, index_after: int) -> bool:
    i = index_after
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    return text[i:i + len(TR_SUFFIX)] == TR_SUFFIX


def is_call_site_argument(text: str, index: int, call_sites: Iterable[str]) -> bool:
    """
    `print(  'x')` / `log('x')`：字面量紧跟在 `(` 后面，且 `(` 前的标识符恰好是
    call_sites 之一（`myprint(` 不算，`developer.log(` 算）。
    """
    names = set(call_sites)
    if not names:
        return False

    i = index - 1
    while i >= 0 and text[i].isspace():
        i -= 1
    if i < 0 or text[i] != "(":
        return False
    i -= 1
    while i >= 0 and text[i].isspace():
        i -= 1

    end = i + 1
    while i >= 0 and _is_ident_char(text[i]):
        i -= 1
    ident = text[i + 1:end]
    return ident in names


def classify(
        text: str,
        span: LiteralSpan,
        call_sites: Sequence[str] = DEFAULT_CALL_SITES,
) -> ClassificationResult:
    """Rules are checked in order; the first one that matches decides."""
    if is_within_import_line(text, span.start):
        reason = SkipReason.IMPORT_LINE
    elif not span.raw_value:
        reason = SkipReason.EMPTY_VALUE
    elif "/" in span.raw_value:
        reason = SkipReason.CONTAINS_SLASH
    elif is_followed_by_tr(text, span.end):
        reason = SkipReason.ALREADY_SUFFIXED
    elif is_call_site_argument(text, span.start, call_sites):
        reason = SkipReason.INSIDE_PRINT_OR_LOG
    else:
        return ClassificationResult(span=span, eligible=True)
    return ClassificationResult(span=span, eligible=False, skip_reason=reason)


def classify_all(
        text: str,
        spans: Iterable[LiteralSpan],
        call_sites: Sequence[str] = DEFAULT_CALL_SITES,
) -> List[ClassificationResult]:
    return [classify(text, s, call_sites) for s in spans]
