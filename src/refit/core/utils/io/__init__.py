"""I/O utilities for refit.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, byte-faithful text I/O
- YAML: reads with locking, deterministic directory iteration
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .yaml import (
    iter_yaml_files,
    read_yaml,
    resolve_yaml_path,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    # yaml
    "read_yaml",
    "iter_yaml_files",
    "resolve_yaml_path",
]
