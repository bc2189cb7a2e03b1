"""
refit CLI package.

Provides the command-line interface with auto-discovery of commands from
``refit/cli/commands/``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_repo_root_flag,
    add_dry_run_flag,
    add_verbose_flag,
    add_root_flag,
    add_extension_flag,
    add_standard_flags,
)
from ._utils import (
    display_path,
    get_repo_root,
    get_root_dir,
    load_settings,
    resolve_project_root,
    setup_logging,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_root_flag",
    "add_extension_flag",
    "add_standard_flags",
    # Utilities
    "display_path",
    "get_repo_root",
    "get_root_dir",
    "load_settings",
    "resolve_project_root",
    "setup_logging",
]
