"""Batch runs over a directory tree.

A :class:`Runner` discovers the candidate files once per run and applies
one pass to each of them, sequentially:

- ``format``: blank-line normalization
- ``stats``: the format pass's statistics without writing anything
- ``rewrite``: legacy identifier migration with import injection

A file is written back only when its content changed (and never in dry-run
mode). Failures reading or writing one file are recorded on that file's
outcome and the run moves on; only a missing root directory aborts the run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from refit.core.discovery import find_files
from refit.core.rewrite import InjectionStatus, RuleSet, rewrite_source
from refit.core.utils.io import read_text, write_text
from refit.core.whitespace import (
    DEFAULT_MAX_BLANK_LINES,
    FileStats,
    collapse_blank_lines,
    file_stats,
)

logger = logging.getLogger(__name__)


class PassName(str, Enum):
    FORMAT = "format"
    STATS = "stats"
    REWRITE = "rewrite"


@dataclass
class FileOutcome:
    """Result of one pass over one file.

    ``changed`` means the pass produced different content (for ``stats``:
    formatting would change the file). ``written`` is only ever True when
    the new content was saved.
    """

    path: Path
    changed: bool = False
    written: bool = False
    error: Optional[str] = None
    stats_before: Optional[FileStats] = None
    stats_after: Optional[FileStats] = None
    triggered: bool = False
    injection: Optional[InjectionStatus] = None
    replacements: Dict[str, int] = field(default_factory=dict)
    calls_removed: int = 0
    manual_pending: Dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def blank_lines_removed(self) -> int:
        if self.stats_before is None or self.stats_after is None or not self.changed:
            return 0
        return max(0, self.stats_before.blank_lines - self.stats_after.blank_lines)

    @property
    def identifiers_replaced(self) -> int:
        return sum(self.replacements.values())

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "path": str(self.path),
            "changed": self.changed,
            "written": self.written,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.stats_before is not None:
            data["stats_before"] = self.stats_before.to_dict()
        if self.stats_after is not None:
            data["stats_after"] = self.stats_after.to_dict()
            data["blank_lines_removed"] = self.blank_lines_removed
        if self.injection is not None or self.triggered:
            data["triggered"] = self.triggered
            data["injection"] = self.injection.value if self.injection else None
            data["replacements"] = dict(self.replacements)
            data["identifiers_replaced"] = self.identifiers_replaced
            data["calls_removed"] = self.calls_removed
        if self.manual_pending:
            data["manual_pending"] = dict(self.manual_pending)
        return data


@dataclass
class RunOutcome:
    pass_name: PassName
    root: Path
    extension: str
    dry_run: bool = False
    files: List[FileOutcome] = field(default_factory=list)

    @property
    def files_scanned(self) -> int:
        return len(self.files)

    @property
    def files_changed(self) -> int:
        return sum(1 for f in self.files if f.changed)

    @property
    def files_written(self) -> int:
        return sum(1 for f in self.files if f.written)

    @property
    def failures(self) -> List[FileOutcome]:
        return [f for f in self.files if f.failed]

    @property
    def blank_lines_removed(self) -> int:
        return sum(f.blank_lines_removed for f in self.files)

    @property
    def identifiers_replaced(self) -> int:
        return sum(f.identifiers_replaced for f in self.files)

    @property
    def calls_removed(self) -> int:
        return sum(f.calls_removed for f in self.files)

    @property
    def anchor_not_found(self) -> List[FileOutcome]:
        return [f for f in self.files if f.injection is InjectionStatus.ANCHOR_NOT_FOUND]

    @property
    def manual_pending(self) -> List[FileOutcome]:
        return [f for f in self.files if f.manual_pending]

    @property
    def excessive_sections_before(self) -> int:
        return sum(f.stats_before.excessive_blank_sections for f in self.files if f.stats_before)

    def summary(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "files_scanned": self.files_scanned,
            "files_changed": self.files_changed,
            "files_written": self.files_written,
            "files_failed": len(self.failures),
        }
        if self.pass_name is PassName.REWRITE:
            data["identifiers_replaced"] = self.identifiers_replaced
            data["calls_removed"] = self.calls_removed
            data["anchor_not_found"] = len(self.anchor_not_found)
            data["manual_pending"] = len(self.manual_pending)
        else:
            data["blank_lines_removed"] = self.blank_lines_removed
            data["excessive_sections_before"] = self.excessive_sections_before
        return data

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pass": self.pass_name.value,
            "root": str(self.root),
            "extension": self.extension,
            "dry_run": self.dry_run,
            "summary": self.summary(),
            "files": [f.to_dict() for f in self.files],
        }


Transform = Callable[[FileOutcome, str], str]


class Runner:
    """Apply one pass to every candidate file under ``root``."""

    def __init__(
        self,
        root: Path,
        extension: str,
        *,
        dry_run: bool = False,
        on_file: Optional[Callable[[FileOutcome], None]] = None,
    ) -> None:
        self.root = Path(root)
        self.extension = extension.lstrip(".")
        self.dry_run = dry_run
        self.on_file = on_file

    def discover(self) -> List[Path]:
        """Candidate files, sorted. Raises DirectoryNotFoundError if root is missing."""
        return find_files(self.root, self.extension)

    def run_format(
        self,
        max_blank_lines: int = DEFAULT_MAX_BLANK_LINES,
        *,
        files: Optional[Sequence[Path]] = None,
    ) -> RunOutcome:
        def transform(outcome: FileOutcome, content: str) -> str:
            outcome.stats_before = file_stats(content, max_blank_lines)
            new_content = collapse_blank_lines(content, max_blank_lines)
            outcome.stats_after = file_stats(new_content, max_blank_lines)
            return new_content

        return self._run(PassName.FORMAT, transform, files=files)

    def run_stats(
        self,
        max_blank_lines: int = DEFAULT_MAX_BLANK_LINES,
        *,
        files: Optional[Sequence[Path]] = None,
    ) -> RunOutcome:
        def transform(outcome: FileOutcome, content: str) -> str:
            outcome.stats_before = file_stats(content, max_blank_lines)
            return collapse_blank_lines(content, max_blank_lines)

        return self._run(PassName.STATS, transform, files=files, write=False)

    def run_rewrite(
        self, rule_set: RuleSet, *, files: Optional[Sequence[Path]] = None
    ) -> RunOutcome:
        def transform(outcome: FileOutcome, content: str) -> str:
            result = rewrite_source(content, rule_set)
            outcome.triggered = result.triggered
            outcome.injection = result.injection
            outcome.replacements = result.replacements
            outcome.calls_removed = result.calls_removed
            outcome.manual_pending = result.manual_pending
            if result.injection is InjectionStatus.ANCHOR_NOT_FOUND:
                logger.warning("%s: guard not found, import block not injected", outcome.path)
            return result.content

        return self._run(PassName.REWRITE, transform, files=files)

    def _run(
        self,
        pass_name: PassName,
        transform: Transform,
        *,
        files: Optional[Sequence[Path]] = None,
        write: bool = True,
    ) -> RunOutcome:
        """Process ``files``, or a fresh discovery of ``root`` when None."""
        files = self.discover() if files is None else list(files)
        logger.info("%s: %d files under %s", pass_name.value, len(files), self.root)

        run = RunOutcome(
            pass_name=pass_name,
            root=self.root,
            extension=self.extension,
            dry_run=self.dry_run,
        )
        for path in files:
            outcome = self._process(path, transform, write=write and not self.dry_run)
            run.files.append(outcome)
            if self.on_file is not None:
                self.on_file(outcome)
        return run

    def _process(self, path: Path, transform: Transform, *, write: bool) -> FileOutcome:
        outcome = FileOutcome(path=path)
        try:
            content = read_text(path)
            new_content = transform(outcome, content)
            outcome.changed = new_content != content
            if outcome.changed and write:
                write_text(path, new_content)
                outcome.written = True
                logger.debug("Wrote %s", path)
        except (OSError, UnicodeError) as exc:
            outcome.error = str(exc)
            logger.error("Failed to process %s: %s", path, exc)
        return outcome


__all__ = ["PassName", "FileOutcome", "RunOutcome", "Runner"]
