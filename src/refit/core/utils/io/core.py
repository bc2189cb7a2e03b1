"""Core I/O utilities for refit.

Single source of truth for safe file access patterns:
- Atomic writes with fsync and advisory locks
- Byte-faithful text file read/write operations
- Directory management utilities

Text is decoded as UTF-8 with ``surrogateescape`` and without newline
translation, so a read followed by a write of the same string reproduces
the original bytes exactly (including ``\\r\\n`` endings and bytes that are
not valid UTF-8).
"""
from __future__ import annotations

import fcntl
import os
import stat
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

PathLike = Union[str, Path]

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: Path) -> Path:
    """Create ``path`` (and parents) if missing and return it.

    Raises:
        NotADirectoryError: If path exists but is not a directory
    """
    path = Path(path)

    if path.exists():
        if not path.is_dir():
            raise NotADirectoryError(f"Path exists but is not a directory: {path}")
        return path

    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = TEXT_ENCODING,
    errors: str = TEXT_ERRORS,
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    - Parent directory is created if missing
    - Data is written to a temporary file in the same directory, with no
      newline translation
    - The permission bits of an existing target are carried over
    - File is fsync'd, unlocked, then atomically replaced
    - Any leftover temp file is cleaned up on failure

    Args:
        path: Target file path
        write_fn: Callable that writes content to the file object
        encoding: Text encoding (default: utf-8)
        errors: Encoding error handler (default: surrogateescape)
    """
    path = Path(path)
    ensure_parent_dir(path)

    mode: Optional[int] = None
    if path.exists():
        mode = stat.S_IMODE(path.stat().st_mode)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            errors=errors,
            newline="",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                # Best-effort cleanup; never mask the original error
                pass


def read_text(path: PathLike) -> str:
    """Read a text file exactly as stored on disk.

    Raises:
        FileNotFoundError: If the file does not exist
        Other I/O errors are propagated to callers
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Text file not found: {path}")
    with open(path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="") as f:
        return f.read()


def write_text(path: PathLike, content: str) -> None:
    """Atomically write ``content`` to ``path`` without newline translation."""
    target = Path(path)

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(target, _writer)


__all__ = [
    "PathLike",
    "TEXT_ENCODING",
    "TEXT_ERRORS",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
]
