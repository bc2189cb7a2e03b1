"""Full rewrite of one source text: trigger, inject, rewrite."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .identifiers import IdentifierRewrite, find_manual_identifiers, needs_rewrite, rewrite_identifiers
from .imports import InjectionStatus, inject_imports
from .rules import RuleSet


@dataclass
class SourceRewrite:
    content: str
    triggered: bool = False
    injection: Optional[InjectionStatus] = None
    replacements: Dict[str, int] = field(default_factory=dict)
    calls_removed: int = 0
    manual_pending: Dict[str, int] = field(default_factory=dict)

    @property
    def identifiers_replaced(self) -> int:
        return sum(self.replacements.values())


def rewrite_source(content: str, rule_set: RuleSet) -> SourceRewrite:
    """Migrate ``content`` according to ``rule_set``.

    Untriggered content is returned untouched (``injection`` is None).
    Otherwise the import block is anchored on the guard of the *original*
    text, and the identifier rewriter runs on the text before and after the
    inserted block only, so the block is never rewritten.
    """
    if not needs_rewrite(content, rule_set):
        return SourceRewrite(
            content=content,
            manual_pending=find_manual_identifiers(content, rule_set.table),
        )

    injection = inject_imports(content, rule_set.imports, rule_set.guard)

    if injection.span is not None:
        start, end = injection.span
        head = rewrite_identifiers(injection.content[:start], rule_set)
        tail = rewrite_identifiers(injection.content[end:], rule_set)
        rewritten = IdentifierRewrite(
            content=head.content + injection.content[start:end] + tail.content,
            replacements=dict(head.replacements),
            calls_removed=head.calls_removed,
        )
        rewritten.merge(tail)
    else:
        rewritten = rewrite_identifiers(injection.content, rule_set)

    return SourceRewrite(
        content=rewritten.content,
        triggered=True,
        injection=injection.status,
        replacements=rewritten.replacements,
        calls_removed=rewritten.calls_removed,
        manual_pending=find_manual_identifiers(rewritten.content, rule_set.table),
    )


__all__ = ["SourceRewrite", "rewrite_source"]
