"""Typed accessors over the merged refit configuration."""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .manager import ConfigManager


class RefitConfig:
    """Read-only view of the settings a run needs.

    Usage:
        cfg = RefitConfig(repo_root=Path("/path/to/site"))
        cfg.root_dir        # absolute directory to process
        cfg.max_blank_lines
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._manager = ConfigManager(repo_root)
        self._config = config if config is not None else self._manager.load_config()

    @property
    def repo_root(self) -> Path:
        return self._manager.repo_root

    def section(self, name: str) -> Dict[str, Any]:
        value = self._config.get(name)
        return value if isinstance(value, dict) else {}

    def _resolve(self, raw: str) -> Path:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = self.repo_root / path
        return path

    @cached_property
    def root_dir(self) -> Path:
        """Directory tree to process, resolved against the repo root."""
        return self._resolve(str(self.section("paths").get("root", ".")))

    @cached_property
    def extension(self) -> str:
        return str(self.section("files").get("extension", "")).lstrip(".")

    @cached_property
    def max_blank_lines(self) -> int:
        return int(self.section("format").get("max_blank_lines", 2))

    @cached_property
    def rules(self) -> str:
        return str(self.section("rewrite").get("rules", ""))

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level", "INFO")).upper()

    @cached_property
    def log_file(self) -> Optional[Path]:
        raw = self.section("logging").get("file")
        if not raw:
            return None
        return self._resolve(str(raw))

    @cached_property
    def json_indent(self) -> int:
        return int(self.section("output").get("json_indent", 2))


__all__ = ["RefitConfig"]
