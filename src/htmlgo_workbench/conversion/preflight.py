"""Local checks and rewrites applied to builder code before it is sent.

Only the builder-to-markup direction runs these. Rejections short-circuit
the request with a fixed explanatory placeholder; the binding rewrite makes
sure the converter always receives a top-level ``var n = ...`` declaration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

BARE_CONDITIONAL_PATTERN = re.compile(r"(?::=|(?<![=!<>:])=(?!=))\s*if\b")
MALFORMED_CONDITIONAL_PATTERN = re.compile(r"\bif\s+(?:(?:true|false)\s+)?\{|\bif\{")

BARE_CONDITIONAL_PLACEHOLDER = """\
<!-- Conversion rejected: syntax error: unexpected if, expected expression -->
<!-- Go has no conditional expression. Two safe rewrites: -->
<!--
    // 1. Wrap the condition in an immediately-called function
    var n = htmlgo.Div().Text(func() string {
        if condition {
            return "yes"
        }
        return "no"
    }())

    // 2. Use a boolean-keyed map lookup
    condition := true
    var n = htmlgo.Div().Text(map[bool]string{true: "yes", false: "no"}[condition])
-->
"""

MALFORMED_CONDITIONAL_PLACEHOLDER = (
    "<!-- Warning: the builder code contains a malformed conditional statement; "
    "check the if syntax -->"
)

UNBALANCED_PLACEHOLDER = (
    "<!-- Warning: unbalanced {kind} in builder code: "
    "{opened} opening, {closed} closing -->"
)

CheckFn = Callable[[str], Optional[str]]


def check_bare_conditional(source: str) -> Optional[str]:
    if BARE_CONDITIONAL_PATTERN.search(source):
        return BARE_CONDITIONAL_PLACEHOLDER
    return None


def check_malformed_conditional(source: str) -> Optional[str]:
    if MALFORMED_CONDITIONAL_PATTERN.search(source):
        return MALFORMED_CONDITIONAL_PLACEHOLDER
    return None


def _balance_check(kind: str, opener: str, closer: str) -> CheckFn:
    def check(source: str) -> Optional[str]:
        opened, closed = source.count(opener), source.count(closer)
        if opened != closed:
            return UNBALANCED_PLACEHOLDER.format(
                kind=kind, opened=opened, closed=closed
            )
        return None

    check.__name__ = f"check_{kind}"
    return check


check_braces = _balance_check("braces", "{", "}")
check_parens = _balance_check("parentheses", "(", ")")


@dataclass(frozen=True, slots=True)
class PreflightCheck:
    name: str
    check: CheckFn


DEFAULT_CHECKS: Tuple[PreflightCheck, ...] = (
    PreflightCheck("bare_conditional", check_bare_conditional),
    PreflightCheck("malformed_conditional", check_malformed_conditional),
    PreflightCheck("braces", check_braces),
    PreflightCheck("parentheses", check_parens),
)


@dataclass(frozen=True, slots=True)
class PreflightOutcome:
    """Either a rewritten source to send, or a rejection placeholder."""

    source: str
    rejection: Optional[str] = None
    rule: Optional[str] = None
    rewritten: bool = False

    @property
    def rejected(self) -> bool:
        return self.rejection is not None


def has_binding(source: str, binding_name: str) -> bool:
    name = re.escape(binding_name)
    pattern = re.compile(
        rf"^\s*(?:var\s+{name}\b[^=\n]*=|{name}\s*:=)", re.MULTILINE
    )
    return pattern.search(source) is not None


def first_expression_line(source: str) -> Optional[str]:
    for line in source.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("//"):
            return stripped
    return None


def ensure_binding(source: str, binding_name: str) -> Tuple[str, bool]:
    """Wrap the first expression line in ``var <binding_name> = ...`` if needed."""

    if has_binding(source, binding_name):
        return source, False
    expression = first_expression_line(source)
    if expression is None:
        return source, False
    return f"var {binding_name} = {expression}", True


def run_preflight(
    source: str,
    *,
    binding_name: str = "n",
    checks: Tuple[PreflightCheck, ...] = DEFAULT_CHECKS,
) -> PreflightOutcome:
    for entry in checks:
        rejection = entry.check(source)
        if rejection is not None:
            return PreflightOutcome(source=source, rejection=rejection, rule=entry.name)
    rewritten, changed = ensure_binding(source, binding_name)
    return PreflightOutcome(
        source=rewritten,
        rule="binding" if changed else None,
        rewritten=changed,
    )


__all__ = [
    "BARE_CONDITIONAL_PLACEHOLDER",
    "DEFAULT_CHECKS",
    "MALFORMED_CONDITIONAL_PLACEHOLDER",
    "PreflightCheck",
    "PreflightOutcome",
    "UNBALANCED_PLACEHOLDER",
    "ensure_binding",
    "first_expression_line",
    "has_binding",
    "run_preflight",
]
