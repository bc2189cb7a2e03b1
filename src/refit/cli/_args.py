"""Common CLI argument registration utilities.

Reusable argument registration functions shared by the refit commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for repository root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override repository root path (default: nearest parent with .refit/, else cwd)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )


def add_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --root flag overriding ``paths.root``."""
    parser.add_argument(
        "--root",
        type=str,
        help="Directory to process (default: paths.root from config, relative to the repo root)",
    )


def add_extension_flag(parser: argparse.ArgumentParser) -> None:
    """Add --extension flag overriding ``files.extension``."""
    parser.add_argument(
        "--extension",
        type=str,
        help="File extension to process, without the dot (default: files.extension from config)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Flags every run command accepts."""
    add_root_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_root_flag",
    "add_extension_flag",
    "add_standard_flags",
]
