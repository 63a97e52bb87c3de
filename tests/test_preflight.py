from __future__ import annotations

import pytest

from htmlgo_workbench.conversion.preflight import (
    BARE_CONDITIONAL_PLACEHOLDER,
    MALFORMED_CONDITIONAL_PLACEHOLDER,
    PreflightCheck,
    ensure_binding,
    first_expression_line,
    has_binding,
    run_preflight,
)


@pytest.mark.parametrize(
    "source",
    [
        'var n = if ok { h.Div() }',
        'label := if active { "on" } else { "off" }',
        'x =  if',
    ],
)
def test_bare_conditional_is_rejected(source: str) -> None:
    outcome = run_preflight(source)

    assert outcome.rejected
    assert outcome.rule == "bare_conditional"
    assert outcome.rejection == BARE_CONDITIONAL_PLACEHOLDER
    assert "map[bool]string" in BARE_CONDITIONAL_PLACEHOLDER


def test_equality_comparison_is_not_a_bare_conditional() -> None:
    outcome = run_preflight("var n = h.Div(a == ifValue)")

    assert not outcome.rejected


def test_malformed_conditional_is_rejected() -> None:
    outcome = run_preflight("var n = h.Div()\nif {\n}")

    assert outcome.rule == "malformed_conditional"
    assert outcome.rejection == MALFORMED_CONDITIONAL_PLACEHOLDER


def test_unbalanced_braces_report_counts() -> None:
    outcome = run_preflight("var n = h.Div(func() string { return \"x\" }(), {)")

    assert outcome.rule == "braces"
    assert outcome.rejection == (
        "<!-- Warning: unbalanced braces in builder code: 2 opening, 1 closing -->"
    )


def test_unbalanced_parentheses_report_counts() -> None:
    outcome = run_preflight("var n = h.Div(h.P(\"x\")")

    assert outcome.rule == "parentheses"
    assert "2 opening, 1 closing" in (outcome.rejection or "")


def test_checks_run_in_order() -> None:
    # Both braces and parentheses are unbalanced; braces are checked first.
    outcome = run_preflight("h.Div({")

    assert outcome.rule == "braces"


def test_bare_expression_is_wrapped_in_binding() -> None:
    outcome = run_preflight("\n// heading\nh.Div()\n.Class(\"x\")")

    assert not outcome.rejected
    assert outcome.rewritten
    assert outcome.rule == "binding"
    assert outcome.source == "var n = h.Div()"


def test_existing_binding_is_sent_unchanged() -> None:
    source = 'var n = h.Div(\n\th.Text("hi"),\n)'

    outcome = run_preflight(source)

    assert outcome.source == source
    assert not outcome.rewritten
    assert outcome.rule is None


def test_short_declaration_counts_as_binding() -> None:
    assert has_binding("n := h.Div()", "n")
    assert has_binding("  var n htmlgo.HTMLComponent = h.Div()", "n")
    assert not has_binding("var node = h.Div()", "n")


def test_custom_binding_name() -> None:
    rewritten, changed = ensure_binding("h.Div()", "root")

    assert changed
    assert rewritten == "var root = h.Div()"
    assert run_preflight("h.Div()", binding_name="root").source == rewritten


def test_first_expression_line_skips_blank_and_comment_lines() -> None:
    assert first_expression_line("\n  // only a comment\n") is None
    assert first_expression_line("\n   h.Span()  \n") == "h.Span()"


def test_custom_checks_replace_defaults() -> None:
    never = PreflightCheck("never", lambda source: None)

    outcome = run_preflight("var n = if x", checks=(never,))

    assert not outcome.rejected
