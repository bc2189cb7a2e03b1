"""Shared CLI utility functions.

Common helpers used across the refit commands: repository root detection,
settings loading, logging setup and path display.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from refit.core.config import PROJECT_CONFIG_DIRNAME, RefitConfig
from refit.core.stdlib_logging import configure_stdlib_logging


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Nearest directory at or above ``start`` holding a ``.refit/`` directory.

    Falls back to ``start`` (default: cwd) when no marker is found.
    """
    cwd = Path(start or Path.cwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        if (parent / PROJECT_CONFIG_DIRNAME).is_dir():
            return parent
    return cwd


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from args or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def load_settings(args: argparse.Namespace) -> RefitConfig:
    """Load configuration for the repo root selected by ``args``.

    Raises:
        ConfigError: If configuration is invalid.
    """
    return RefitConfig(repo_root=get_repo_root(args))


def setup_logging(args: argparse.Namespace, cfg: RefitConfig) -> None:
    configure_stdlib_logging(
        level=cfg.log_level,
        log_path=cfg.log_file,
        verbose=bool(getattr(args, "verbose", False)),
    )


def get_root_dir(args: argparse.Namespace, cfg: RefitConfig) -> Path:
    """``--root`` when given (relative to cwd), else ``paths.root`` from config."""
    if getattr(args, "root", None):
        return Path(args.root).expanduser().resolve()
    return cfg.root_dir


def display_path(path: Path, root: Path) -> str:
    """``path`` relative to ``root`` when possible, for progress lines."""
    try:
        return str(Path(path).relative_to(root))
    except ValueError:
        return str(path)


__all__ = [
    "resolve_project_root",
    "get_repo_root",
    "load_settings",
    "setup_logging",
    "get_root_dir",
    "display_path",
]
