from __future__ import annotations

import pytest

from dart_tr.classifier import classify, classify_all, is_call_site_argument, is_followed_by_tr
from dart_tr.models import SkipReason
from dart_tr.scanner import scan_literals


def _reasons(text, call_sites=("print", "log")):
    results = classify_all(text, scan_literals(text), call_sites)
    return [(r.span.raw_value, r.skip_reason) for r in results]


def test_import_line_literal_is_never_eligible():
    assert _reasons("import 'x.dart';") == [("x.dart", SkipReason.IMPORT_LINE)]
    # import 行优先于其它规则
    assert _reasons("  import 'hello';") == [("hello", SkipReason.IMPORT_LINE)]


def test_import_prefix_needs_trailing_space():
    assert _reasons("important('Hello');") == [("Hello", SkipReason.NONE)]
    assert _reasons("Import 'Hello';") == [("Hello", SkipReason.NONE)]


def test_empty_and_slash_values():
    assert _reasons("a = \"\"; b = \"a/b\";") == [
        ("", SkipReason.EMPTY_VALUE),
        ("a/b", SkipReason.CONTAINS_SLASH),
    ]


def test_already_suffixed():
    assert _reasons("t = 'Hello'.tr();") == [("Hello", SkipReason.ALREADY_SUFFIXED)]
    assert _reasons("t = 'Hello'  \n   .tr();") == [("Hello", SkipReason.ALREADY_SUFFIXED)]
    # .tr 不带括号不算
    assert _reasons("t = 'Hello'.tr;") == [("Hello", SkipReason.NONE)]


@pytest.mark.parametrize(
    "text",
    [
        "print('debug');",
        "print(  'debug' );",
        "print ('debug');",
        "log('debug');",
        "developer.log('debug');",
    ],
)
def test_print_and_log_arguments_are_skipped(text):
    assert _reasons(text) == [("debug", SkipReason.INSIDE_PRINT_OR_LOG)]


@pytest.mark.parametrize("text", ["myprint('debug');", "debugPrint('debug');", "catalog('debug');", "_log('debug');"])
def test_identifier_boundary_for_call_sites(text):
    assert _reasons(text) == [("debug", SkipReason.NONE)]


def test_only_literal_right_after_paren_is_skipped():
    assert _reasons("print('a' + 'b');") == [
        ("a", SkipReason.INSIDE_PRINT_OR_LOG),
        ("b", SkipReason.NONE),
    ]


def test_empty_call_sites_disables_rule():
    assert _reasons("print('debug');", call_sites=()) == [("debug", SkipReason.NONE)]


def test_rule_order_slash_before_suffix():
    assert _reasons("x = 'a/b'.tr();") == [("a/b", SkipReason.CONTAINS_SLASH)]


def test_classify_is_stateless_per_span():
    text = "a = 'x'; b = 'y';"
    spans = scan_literals(text)
    assert classify(text, spans[1]) == classify_all(text, spans)[1]


def test_helpers_at_buffer_edges():
    assert is_followed_by_tr("'a'", 3) is False
    assert is_call_site_argument("'a'", 0, ("print",)) is False
    assert is_call_site_argument("('a'", 1, ("print",)) is False
