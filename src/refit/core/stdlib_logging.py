from __future__ import annotations

import logging
import sys
from pathlib import Path

from refit.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_REFIT_HANDLERS: list[logging.Handler] = []


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(
    *,
    level: str = "INFO",
    log_path: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure the ``refit`` logger hierarchy.

    - ``log_path`` installs a file handler at ``level``.
    - ``verbose`` installs a stderr handler at DEBUG.
    - Nothing is ever written to stdout, so ``--json`` output stays parseable.

    Calling again replaces the handlers installed by the previous call.
    """
    reset_stdlib_logging()

    logger = logging.getLogger("refit")
    threshold = logging.DEBUG if verbose else _level_from_name(level)
    logger.setLevel(threshold)

    fmt = logging.Formatter(LOG_FORMAT)

    if log_path is not None:
        resolved = Path(log_path).resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(resolved, encoding="utf-8")
        fh.setLevel(_level_from_name(level))
        fh.setFormatter(fmt)
        logger.addHandler(fh)
        _REFIT_HANDLERS.append(fh)

    if verbose:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.DEBUG)
        sh.setFormatter(fmt)
        logger.addHandler(sh)
        _REFIT_HANDLERS.append(sh)

    if not _REFIT_HANDLERS:
        # Keep stdlib's lastResort handler from printing warnings to stderr
        # in the middle of regular CLI output.
        nh = logging.NullHandler()
        logger.addHandler(nh)
        _REFIT_HANDLERS.append(nh)


def reset_stdlib_logging() -> None:
    """Remove and close every handler installed by :func:`configure_stdlib_logging`."""
    logger = logging.getLogger("refit")
    while _REFIT_HANDLERS:
        h = _REFIT_HANDLERS.pop()
        logger.removeHandler(h)
        h.close()


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging"]
