"""Unified CLI output formatting utilities.

Provides consistent output for all refit CLI commands, supporting both JSON
and text output modes. In JSON mode only the final document goes to stdout.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output
        """
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            context = getattr(error, "context", None)
            if context:
                output["context"] = context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str = "") -> None:
        """Output plain text message (suppressed in JSON mode)."""
        if not self.json_mode:
            print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")

    def section(self, title: str) -> None:
        """Output a ``=== TITLE ===`` section header in text mode."""
        if not self.json_mode:
            print(f"\n=== {title.upper()} ===")


__all__ = ["OutputFormatter"]
