"""Blank-line normalization and blank-line statistics.

A line is *blank* when nothing but whitespace remains after trimming both
ends. Whitespace here is the classic C set (space, tab, ``\\n``, ``\\r``,
NUL, vertical tab); form feeds and Unicode spaces are content.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

DEFAULT_MAX_BLANK_LINES = 2

TRIM_CHARS = " \t\n\r\0\x0b"


def is_blank(line: str) -> bool:
    return line.strip(TRIM_CHARS) == ""


def collapse_blank_lines(text: str, max_blank_lines: int = DEFAULT_MAX_BLANK_LINES) -> str:
    """Normalize ``text``.

    - trailing whitespace is removed from every line
    - runs of blank lines longer than ``max_blank_lines`` are cut down to
      ``max_blank_lines``
    - blank lines at the end of the document are dropped and exactly one
      ``\\n`` terminates it

    The result is a fixed point: collapsing it again returns it unchanged.

    Example:
        >>> collapse_blank_lines("a\\n\\n\\n\\n\\nb\\n\\n")
        'a\\n\\n\\nb\\n'
    """
    kept: List[str] = []
    consecutive = 0

    for line in text.split("\n"):
        trimmed = line.rstrip(TRIM_CHARS)
        if is_blank(line):
            consecutive += 1
            if consecutive <= max_blank_lines:
                kept.append(trimmed)
        else:
            consecutive = 0
            kept.append(trimmed)

    return "\n".join(kept).rstrip(TRIM_CHARS) + "\n"


@dataclass(frozen=True)
class FileStats:
    """Descriptive blank-line counts for one document (reporting only)."""

    total_lines: int
    blank_lines: int
    max_consecutive_blank: int
    excessive_blank_sections: int

    def has_excessive_blank_runs(self, max_blank_lines: int = DEFAULT_MAX_BLANK_LINES) -> bool:
        return self.max_consecutive_blank > max_blank_lines

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def file_stats(text: str, max_blank_lines: int = DEFAULT_MAX_BLANK_LINES) -> FileStats:
    """Count lines, blank lines, the longest blank run and over-long blank runs.

    Lines are the ``\\n``-separated segments of ``text``, so a document ending
    in a newline has an empty last segment that counts as a blank line. A run
    reaching the end of the document is counted like any other.
    """
    lines = text.split("\n")
    blank = 0
    longest = 0
    current = 0
    excessive = 0

    for line in lines:
        if is_blank(line):
            blank += 1
            current += 1
            longest = max(longest, current)
        else:
            if current > max_blank_lines:
                excessive += 1
            current = 0

    if current > max_blank_lines:
        excessive += 1

    return FileStats(
        total_lines=len(lines),
        blank_lines=blank,
        max_consecutive_blank=longest,
        excessive_blank_sections=excessive,
    )


__all__ = [
    "DEFAULT_MAX_BLANK_LINES",
    "TRIM_CHARS",
    "FileStats",
    "collapse_blank_lines",
    "file_stats",
    "is_blank",
]
