"""refit configuration system.

Usage:
    from refit.core.config import ConfigManager, RefitConfig

    # Raw merged mapping
    config = ConfigManager(repo_root=Path("/path/to/site")).load_config()

    # Typed accessors (recommended)
    cfg = RefitConfig(repo_root=Path("/path/to/site"))
    cfg.root_dir
"""
from __future__ import annotations

from .manager import ENV_PREFIX, PROJECT_CONFIG_DIRNAME, ConfigManager, get_project_config_dir
from .settings import RefitConfig

__all__ = [
    "ConfigManager",
    "RefitConfig",
    "ENV_PREFIX",
    "PROJECT_CONFIG_DIRNAME",
    "get_project_config_dir",
]
