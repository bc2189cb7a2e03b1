"""
refit rewrite command.

SUMMARY: Replace legacy identifiers and inject the modern import block

Files that mention a legacy identifier or call a legacy import function are
migrated: the rule set's import block is inserted right after the guard
line, whole-token identifiers are replaced and the import calls are
removed. Files with no legacy usage are left alone.
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
from refit.core.rewrite import InjectionStatus, load_rule_set
from refit.core.runner import FileOutcome, Runner, RunOutcome

SUMMARY = "Replace legacy identifiers and inject the modern import block"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--rules",
        type=str,
        help="Rule set name or path to a rules YAML file (default: rewrite.rules from config)",
    )
    add_extension_flag(parser)
    add_dry_run_flag(parser)
    add_standard_flags(parser)


def _format_counts(counts: dict) -> str:
    return ", ".join(f"{name} x{n}" for name, n in sorted(counts.items()))


def _report_file(
    formatter: OutputFormatter, run_root: Path, dry_run: bool
) -> Callable[[FileOutcome], None]:
    def report(outcome: FileOutcome) -> None:
        formatter.text(f"Processing: {display_path(outcome.path, run_root)}")
        if outcome.failed:
            formatter.text(f"  - Failed: {outcome.error}")
            return
        if not outcome.triggered:
            formatter.text("  - No legacy calls found, skipping")
        else:
            if outcome.injection is InjectionStatus.INJECTED:
                formatter.text("  - Import block injected")
            elif outcome.injection is InjectionStatus.ALREADY_PRESENT:
                formatter.text("  - Import block already present")
            else:
                formatter.text("  - Warning: guard not found, import block not injected")
            if outcome.replacements:
                formatter.text(f"  - Replaced: {_format_counts(outcome.replacements)}")
            if outcome.calls_removed:
                formatter.text(f"  - Removed {outcome.calls_removed} import calls")
            if outcome.changed:
                formatter.text("  - Would be updated" if dry_run else "  - Updated")
            else:
                formatter.text("  - No changes needed")
        if outcome.manual_pending:
            formatter.text(
                f"  - Needs manual migration: {_format_counts(outcome.manual_pending)}"
            )

    return report


def _report_summary(formatter: OutputFormatter, run: RunOutcome, rule_set_name: str) -> None:
    formatter.section("Summary")
    verb = "Would update" if run.dry_run else "Updated"
    formatter.text(
        f"{verb} {run.files_changed} files out of {run.files_scanned} total "
        f".{run.extension} files (rules: {rule_set_name})."
    )
    formatter.text(f"Identifiers replaced: {run.identifiers_replaced}")
    formatter.text(f"Import calls removed: {run.calls_removed}")

    if run.anchor_not_found:
        formatter.text(f"Guard not found (import block missing): {len(run.anchor_not_found)}")
        for f in run.anchor_not_found:
            formatter.text(f"  - {display_path(f.path, run.root)}")

    if run.manual_pending:
        formatter.text(f"Files needing manual migration: {len(run.manual_pending)}")
        for f in run.manual_pending:
            formatter.text(
                f"  - {display_path(f.path, run.root)}: {_format_counts(f.manual_pending)}"
            )

    if run.failures:
        formatter.text(f"Errors: {len(run.failures)}")
        for f in run.failures:
            formatter.text(f"  - {f.path}: {f.error}")


def main(args: argparse.Namespace) -> int:
    """Migrate legacy identifiers in every candidate file."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        cfg = load_settings(args)
        formatter.indent = cfg.json_indent
        setup_logging(args, cfg)

        rule_set = load_rule_set(args.rules or cfg.rules, repo_root=cfg.repo_root)
        root = get_root_dir(args, cfg)
        extension = args.extension or rule_set.extension

        runner = Runner(
            root,
            extension,
            dry_run=args.dry_run,
            on_file=_report_file(formatter, root, args.dry_run),
        )
        files = runner.discover()

        formatter.text("Starting legacy identifier rewrite...")
        formatter.text(f"Processing directory: {root}")
        formatter.text(f"Found {len(files)} .{runner.extension} files")
        formatter.section("Rewriting files")

        run = runner.run_rewrite(rule_set, files=files)
    except RefitError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1

    if formatter.json_mode:
        payload = run.to_dict()
        payload["rules"] = rule_set.name
        formatter.json_output(payload)
    else:
        _report_summary(formatter, run, rule_set.name)

    return 1 if run.failures else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
