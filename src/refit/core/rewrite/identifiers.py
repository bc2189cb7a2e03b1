"""Legacy identifier detection and substitution.

Operates on raw text: a legacy loader call is ``name('some.module')`` with
exactly one quoted string argument, and identifiers are matched as whole
tokens (see :mod:`refit.core.rewrite.tokens`).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Match, Pattern, Sequence, Tuple

from .rules import MappingTable, RuleSet
from .tokens import count_tokens, token_pattern


def _call_expr(names: Tuple[str, ...]) -> str:
    alternatives = "|".join(re.escape(n) for n in names)
    return (
        rf"(?<!\w)(?:{alternatives})\s*\(\s*"
        r"""(?P<q>['"])[^'"\n]*(?P=q)"""
        r"\s*\)"
    )


@lru_cache(maxsize=32)
def _call_patterns(names: Tuple[str, ...]) -> Tuple[Pattern[str], Pattern[str], Pattern[str]]:
    """Return (single call, statement-only line, inline call) patterns for ``names``."""
    call = _call_expr(names)
    statement_line = re.compile(
        rf"^[ \t]*(?:{call}[ \t]*;[ \t]*)+(?:\r?\n|\Z)", re.MULTILINE
    )
    inline = re.compile(rf"{call}(?:[ \t]*;[ \t]*(?:\r?\n)?)?")
    return re.compile(call), statement_line, inline


def has_import_calls(content: str, names: Sequence[str]) -> bool:
    if not names:
        return False
    _, _, inline = _call_patterns(tuple(names))
    return inline.search(content) is not None


def strip_import_calls(content: str, names: Sequence[str]) -> Tuple[str, int]:
    """Remove every legacy loader call statement.

    A line holding nothing but ``call;`` statements is removed whole
    (indentation and line break included). Any other call is removed together
    with a following ``;``, trailing blanks and one line break when present;
    without a ``;`` only the call text itself goes.

    Returns:
        (new content, number of calls removed)
    """
    if not names:
        return content, 0
    call, statement_line, inline = _call_patterns(tuple(names))
    removed = 0

    def _drop_line(match: Match[str]) -> str:
        nonlocal removed
        removed += sum(1 for _ in call.finditer(match.group(0)))
        return ""

    content = statement_line.sub(_drop_line, content)
    content, inline_removed = inline.subn("", content)
    return content, removed + inline_removed


def needs_rewrite(content: str, rule_set: RuleSet) -> bool:
    """Trigger check: does ``content`` use anything the rewriter handles?

    True when an automatic legacy identifier occurs as a whole token, or a
    legacy loader call is present. Manual rules never trigger a rewrite.
    """
    for rule in rule_set.table.automatic:
        if token_pattern(rule.legacy).search(content):
            return True
    return has_import_calls(content, rule_set.import_calls)


def replace_identifiers(content: str, table: MappingTable) -> Tuple[str, Dict[str, int]]:
    """Apply the automatic rules of ``table`` in order.

    Returns:
        (new content, replacements per legacy identifier; zero counts omitted)
    """
    counts: Dict[str, int] = {}
    for rule in table.automatic:
        modern = rule.modern
        content, n = token_pattern(rule.legacy).subn(lambda _m: modern, content)
        if n:
            counts[rule.legacy] = n
    return content, counts


def find_manual_identifiers(content: str, table: MappingTable) -> Dict[str, int]:
    """Occurrences of manual-rule identifiers, for follow-up reporting."""
    found: Dict[str, int] = {}
    for rule in table.manual:
        n = count_tokens(content, rule.legacy)
        if n:
            found[rule.legacy] = n
    return found


@dataclass
class IdentifierRewrite:
    content: str
    replacements: Dict[str, int] = field(default_factory=dict)
    calls_removed: int = 0

    @property
    def identifiers_replaced(self) -> int:
        return sum(self.replacements.values())

    def merge(self, other: "IdentifierRewrite") -> None:
        """Fold counts from ``other`` into this result (content is left alone)."""
        for name, n in other.replacements.items():
            self.replacements[name] = self.replacements.get(name, 0) + n
        self.calls_removed += other.calls_removed


def rewrite_identifiers(content: str, rule_set: RuleSet) -> IdentifierRewrite:
    """Strip loader calls, then replace identifiers in table order.

    Does not run the trigger check; see :func:`needs_rewrite`.
    """
    content, calls = strip_import_calls(content, rule_set.import_calls)
    content, counts = replace_identifiers(content, rule_set.table)
    return IdentifierRewrite(content=content, replacements=counts, calls_removed=calls)


__all__ = [
    "IdentifierRewrite",
    "find_manual_identifiers",
    "has_import_calls",
    "needs_rewrite",
    "replace_identifiers",
    "rewrite_identifiers",
    "strip_import_calls",
]
