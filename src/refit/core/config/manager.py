"""
refit configuration management (layered YAML).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from refit.core.exceptions import ConfigError
from refit.core.schemas import SchemaValidationError, load_schema, validate_payload
from refit.core.utils.io import iter_yaml_files, read_yaml
from refit.core.utils.merge import deep_merge
from refit.data import get_data_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_DIRNAME = ".refit"
ENV_PREFIX = "REFIT_"


def get_project_config_dir(repo_root: Path) -> Path:
    """Return the project-level refit directory (``<repo-root>/.refit``)."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


class ConfigManager:
    """Load, merge, and validate refit configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: REFIT_<section>__<key>
    2. Project config: <repo-root>/.refit/config/*.yaml (alphabetical order)
    3. Bundled defaults: refit.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else Path.cwd()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[str]:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        processed: List[str] = []
        for seg in segs:
            if seg == "":
                if strict:
                    raise ConfigError(
                        f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                        context={"key": f"{ENV_PREFIX}{raw}"},
                    )
                return []
            processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[str], str]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX):
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                if strict:
                    raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
                continue
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, os.environ[key]

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def _expects_string(self, schema: Dict[str, Any], path: List[str]) -> bool:
        """True when the config schema declares ``path`` as string-typed."""
        node: Any = schema
        for part in path:
            props = node.get("properties") if isinstance(node, dict) else None
            if not isinstance(props, dict) or part not in props:
                return False
            node = props[part]
        declared = node.get("type") if isinstance(node, dict) else None
        if isinstance(declared, list):
            return "string" in declared
        return declared == "string"

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        """Overlay ``REFIT_*`` variables onto ``cfg``.

        Values are type-coerced, except for keys the config schema declares
        as strings: ``REFIT_PATHS__ROOT=2024`` names a directory, not a number.
        """
        schema = load_schema("config")
        for path, raw in self._iter_env_overrides(strict=strict):
            if self._expects_string(schema, path):
                typed_value: Any = raw.strip()
            else:
                typed_value = self._coerce_type(raw)
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        """Load all YAML files from a directory and merge into config."""
        for path in iter_yaml_files(directory):
            try:
                module_cfg = read_yaml(path, default={}, raise_on_error=True) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
            if not isinstance(module_cfg, dict):
                raise ConfigError(
                    f"Config file must contain a YAML mapping: {path}",
                    context={"path": str(path)},
                )
            cfg = deep_merge(cfg, module_cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers.

        Args:
            validate: If True, validate against ``config.schema.yaml`` and
                reject malformed ``REFIT_*`` keys.

        Raises:
            ConfigError: If a layer is unreadable or the merged config is invalid.
        """
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg, strict=validate)

        if validate:
            try:
                validate_payload(cfg, "config")
            except SchemaValidationError as exc:
                raise ConfigError(str(exc), context={"errors": exc.errors}) from exc

        return cfg


__all__ = [
    "ConfigManager",
    "ENV_PREFIX",
    "PROJECT_CONFIG_DIRNAME",
    "get_project_config_dir",
]
