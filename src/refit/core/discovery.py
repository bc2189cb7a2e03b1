"""Candidate file discovery."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from refit.core.exceptions import DirectoryNotFoundError

logger = logging.getLogger(__name__)


def find_files(root: Path, extension: str) -> List[Path]:
    """Return every regular file under ``root`` whose extension is ``extension``.

    The walk is recursive and the result is sorted by full path so that runs
    are reproducible regardless of filesystem iteration order. ``extension``
    is compared case-sensitively and may be given with or without its dot.

    Raises:
        DirectoryNotFoundError: If ``root`` does not exist or is not a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryNotFoundError(
            f"Directory not found: {root}",
            context={"root": str(root)},
        )

    suffix = "." + extension.lstrip(".")
    files = sorted(
        p for p in root.rglob(f"*{suffix}")
        if p.suffix == suffix and p.is_file()
    )
    logger.debug("Discovered %d %s files under %s", len(files), suffix, root)
    return files


__all__ = ["find_files"]
