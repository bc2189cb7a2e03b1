"""Legacy identifier migration: rule sets, rewriter and import injector.

Usage:
    from refit.core.rewrite import load_rule_set, rewrite_source

    rules = load_rule_set("joomla")
    result = rewrite_source(text, rules)
    if result.content != text:
        ...
"""
from __future__ import annotations

from .identifiers import (
    IdentifierRewrite,
    find_manual_identifiers,
    has_import_calls,
    needs_rewrite,
    replace_identifiers,
    rewrite_identifiers,
    strip_import_calls,
)
from .imports import InjectionResult, InjectionStatus, inject_imports
from .rules import (
    GuardMarker,
    ImportBlock,
    MappingTable,
    RewriteRule,
    RuleSet,
    available_rule_sets,
    load_rule_set,
)
from .source import SourceRewrite, rewrite_source

__all__ = [
    # rules
    "RewriteRule",
    "MappingTable",
    "ImportBlock",
    "GuardMarker",
    "RuleSet",
    "available_rule_sets",
    "load_rule_set",
    # identifiers
    "IdentifierRewrite",
    "find_manual_identifiers",
    "has_import_calls",
    "needs_rewrite",
    "replace_identifiers",
    "rewrite_identifiers",
    "strip_import_calls",
    # imports
    "InjectionStatus",
    "InjectionResult",
    "inject_imports",
    # whole source
    "SourceRewrite",
    "rewrite_source",
]
