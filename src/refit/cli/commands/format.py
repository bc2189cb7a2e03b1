"""
refit format command.

SUMMARY: Collapse blank-line runs and strip trailing whitespace in place

Every candidate file is normalized: trailing whitespace is removed, runs of
blank lines longer than ``format.max_blank_lines`` are shortened, and the
file ends with exactly one newline. Files that are already normalized are
not written.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from refit.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_extension_flag,
    add_standard_flags,
    display_path,
    get_root_dir,
    load_settings,
    setup_logging,
)
from refit.core.exceptions import RefitError
from refit.core.runner import FileOutcome, Runner, RunOutcome

SUMMARY = "Collapse blank-line runs and strip trailing whitespace in place"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_extension_flag(parser)
    parser.add_argument(
        "--max-blank-lines",
        type=int,
        help="Longest blank-line run to keep (default: format.max_blank_lines from config)",
    )
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def _report_file(
    formatter: OutputFormatter, run_root: Path, dry_run: bool
) -> Callable[[FileOutcome], None]:
    def report(outcome: FileOutcome) -> None:
        formatter.text(f"Processing: {display_path(outcome.path, run_root)}")
        if outcome.failed:
            formatter.text(f"  - Failed: {outcome.error}")
        elif outcome.changed:
            formatter.text("  - Would be formatted" if dry_run else "  - Formatted successfully")
            if outcome.blank_lines_removed > 0:
                formatter.text(f"  - Removed {outcome.blank_lines_removed} excessive blank lines")
        else:
            formatter.text("  - No changes needed")

    return report


def _report_analysis(formatter: OutputFormatter, run: RunOutcome, max_blank_lines: int) -> None:
    formatter.section("Analysis (before formatting)")
    flagged = [
        f for f in run.files
        if f.stats_before is not None and f.stats_before.has_excessive_blank_runs(max_blank_lines)
    ]
    if not flagged:
        formatter.text("No files with excessive blank-line runs")
    for f in flagged:
        s = f.stats_before
        formatter.text(
            f"{f.path.name}: {s.total_lines} lines, {s.blank_lines} blank, "
            f"max consecutive: {s.max_consecutive_blank}"
        )


def _report_summary(formatter: OutputFormatter, run: RunOutcome) -> None:
    formatter.section("Summary")
    verb = "Would format" if run.dry_run else "Formatted"
    formatter.text(
        f"{verb} {run.files_changed} files out of {run.files_scanned} total .{run.extension} files."
    )
    formatter.text(f"Total blank lines removed: {run.blank_lines_removed}")
    formatter.text(
        f"Excessive blank line sections before formatting: {run.excessive_sections_before}"
    )
    if run.failures:
        formatter.text(f"Errors: {len(run.failures)}")
        for f in run.failures:
            formatter.text(f"  - {f.path}: {f.error}")


def main(args: argparse.Namespace) -> int:
    """Normalize blank lines in every candidate file."""
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

        runner = Runner(
            root,
            extension,
            dry_run=args.dry_run,
            on_file=_report_file(formatter, root, args.dry_run),
        )
        files = runner.discover()

        formatter.text("Starting blank-line formatting...")
        formatter.text(f"Processing directory: {root}")
        formatter.text(f"Found {len(files)} .{runner.extension} files")
        if not formatter.json_mode:
            analysis = Runner(root, extension).run_stats(max_blank, files=files)
            _report_analysis(formatter, analysis, max_blank)
        formatter.section("Formatting files")

        run = runner.run_format(max_blank, files=files)
    except RefitError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1

    if formatter.json_mode:
        formatter.json_output(run.to_dict())
    else:
        _report_summary(formatter, run)

    return 1 if run.failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
