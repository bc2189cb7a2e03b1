"""
refit stats command.

SUMMARY: Report blank-line statistics without modifying files
"""

from __future__ import annotations

import argparse
import sys

from refit.cli import (
    OutputFormatter,
    add_extension_flag,
    add_standard_flags,
    display_path,
    get_root_dir,
    load_settings,
    setup_logging,
)
from refit.core.exceptions import RefitError
from refit.core.runner import Runner, RunOutcome

SUMMARY = "Report blank-line statistics without modifying files"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_extension_flag(parser)
    parser.add_argument(
        "--max-blank-lines",
        type=int,
        help="Runs longer than this are reported (default: format.max_blank_lines from config)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="List every file, not only those with excessive blank-line runs",
    )
    add_standard_flags(parser)


def _report(formatter: OutputFormatter, run: RunOutcome, max_blank_lines: int, show_all: bool) -> None:
    formatter.section("Blank-line statistics")
    shown = 0
    for f in run.files:
        if f.failed:
            formatter.text(f"{display_path(f.path, run.root)}: failed ({f.error})")
            continue
        s = f.stats_before
        if s is None or not (show_all or s.has_excessive_blank_runs(max_blank_lines)):
            continue
        shown += 1
        formatter.text(
            f"{display_path(f.path, run.root)}: {s.total_lines} lines, {s.blank_lines} blank, "
            f"max consecutive: {s.max_consecutive_blank}, "
            f"excessive sections: {s.excessive_blank_sections}"
        )
    if not shown and not run.failures:
        formatter.text("No files with excessive blank-line runs")

    formatter.section("Summary")
    formatter.text_kv("Files scanned", run.files_scanned)
    formatter.text_kv("Files that would be formatted", run.files_changed)
    formatter.text_kv("Excessive blank line sections", run.excessive_sections_before)
    if run.failures:
        formatter.text_kv("Errors", len(run.failures))


def main(args: argparse.Namespace) -> int:
    """Print blank-line statistics for every candidate file."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        cfg = load_settings(args)
        formatter.indent = cfg.json_indent
        setup_logging(args, cfg)

        root = get_root_dir(args, cfg)
        extension = args.extension or cfg.extension
        max_blank = args.max_blank_lines if args.max_blank_lines is not None else cfg.max_blank_lines
        if max_blank < 0:
            formatter.error(ValueError("--max-blank-lines must be >= 0"), error_code="invalid_argument")
            return 1

        run = Runner(root, extension).run_stats(max_blank)
    except RefitError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1

    if formatter.json_mode:
        formatter.json_output(run.to_dict())
    else:
        _report(formatter, run, max_blank, args.all)

    return 1 if run.failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
