"""Identifier-boundary matching.

A token matches only where it is neither preceded nor followed by an
identifier character (``\\w``), so ``JText`` never matches inside
``MyJText`` or ``JTextHelper``.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern


@lru_cache(maxsize=256)
def token_pattern(name: str) -> Pattern[str]:
    """Compiled pattern matching ``name`` as a whole token."""
    return re.compile(rf"(?<!\w){re.escape(name)}(?!\w)")


def contains_token(text: str, name: str) -> bool:
    return token_pattern(name).search(text) is not None


def count_tokens(text: str, name: str) -> int:
    return len(token_pattern(name).findall(text))


__all__ = ["token_pattern", "contains_token", "count_tokens"]
