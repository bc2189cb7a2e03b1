"""Tests for layered configuration loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from refit.core.config import ConfigManager, RefitConfig
from refit.core.exceptions import ConfigError


def _project_config(root: Path, name: str, content: str) -> None:
    config_dir = root / ".refit" / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / name).write_text(content, encoding="utf-8")


def test_bundled_defaults(tmp_path: Path) -> None:
    cfg = RefitConfig(repo_root=tmp_path)

    assert cfg.root_dir == tmp_path / "templates" / "html"
    assert cfg.extension == "php"
    assert cfg.max_blank_lines == 2
    assert cfg.rules == "joomla"
    assert cfg.log_level == "INFO"
    assert cfg.log_file is None
    assert cfg.json_indent == 2


def test_project_config_overrides_defaults(tmp_path: Path) -> None:
    _project_config(
        tmp_path,
        "refit.yaml",
        "paths:\n  root: site/overrides\nformat:\n  max_blank_lines: 1\nlogging:\n  file: logs/refit.log\n",
    )

    cfg = RefitConfig(repo_root=tmp_path)

    assert cfg.root_dir == tmp_path / "site" / "overrides"
    assert cfg.max_blank_lines == 1
    assert cfg.log_file == tmp_path / "logs" / "refit.log"
    # untouched keys keep their defaults
    assert cfg.extension == "php"


def test_project_files_merge_alphabetically(tmp_path: Path) -> None:
    _project_config(tmp_path, "a.yaml", "format:\n  max_blank_lines: 5\n")
    _project_config(tmp_path, "b.yml", "format:\n  max_blank_lines: 3\n")

    assert RefitConfig(repo_root=tmp_path).max_blank_lines == 3


def test_absolute_root_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    _project_config(tmp_path, "refit.yaml", f"paths:\n  root: {target}\n")

    assert RefitConfig(repo_root=tmp_path).root_dir == target


def test_env_overrides_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _project_config(tmp_path, "refit.yaml", "format:\n  max_blank_lines: 1\n")
    monkeypatch.setenv("REFIT_FORMAT__MAX_BLANK_LINES", "4")
    monkeypatch.setenv("REFIT_FILES__EXTENSION", "phtml")

    cfg = RefitConfig(repo_root=tmp_path)

    assert cfg.max_blank_lines == 4
    assert cfg.extension == "phtml"


def test_env_values_are_coerced(tmp_path: Path) -> None:
    mgr = ConfigManager(tmp_path)

    assert mgr._coerce_type("true") is True
    assert mgr._coerce_type("12") == 12
    assert mgr._coerce_type("1.5") == 1.5
    assert mgr._coerce_type('["a", "b"]') == ["a", "b"]
    assert mgr._coerce_type(" joomla ") == "joomla"


def test_numeric_env_value_stays_a_string_for_string_keys(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("REFIT_PATHS__ROOT", "2024")
    monkeypatch.setenv("REFIT_FILES__EXTENSION", "3")
    monkeypatch.setenv("REFIT_REWRITE__RULES", "1")
    monkeypatch.setenv("REFIT_FORMAT__MAX_BLANK_LINES", "0")

    cfg = RefitConfig(repo_root=tmp_path)

    assert cfg.root_dir == tmp_path / "2024"
    assert cfg.extension == "3"
    assert cfg.rules == "1"
    assert cfg.max_blank_lines == 0
    assert cfg.section("paths")["root"] == "2024"


def test_malformed_env_key_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REFIT_FORMAT____MAX", "1")

    with pytest.raises(ConfigError, match="Malformed"):
        ConfigManager(tmp_path).load_config()


def test_invalid_value_fails_validation(tmp_path: Path) -> None:
    _project_config(tmp_path, "refit.yaml", "format:\n  max_blank_lines: -1\n")

    with pytest.raises(ConfigError) as excinfo:
        RefitConfig(repo_root=tmp_path)

    assert any("max_blank_lines" in e for e in excinfo.value.context["errors"])


def test_invalid_yaml_is_a_config_error(tmp_path: Path) -> None:
    _project_config(tmp_path, "refit.yaml", "format: [\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigManager(tmp_path).load_config()


def test_non_mapping_config_file(tmp_path: Path) -> None:
    _project_config(tmp_path, "refit.yaml", "- just\n- a list\n")

    with pytest.raises(ConfigError, match="mapping"):
        ConfigManager(tmp_path).load_config()


def test_explicit_config_bypasses_loading(tmp_path: Path) -> None:
    cfg = RefitConfig(
        repo_root=tmp_path,
        config={"paths": {"root": "x"}, "files": {"extension": ".inc"}},
    )

    assert cfg.root_dir == tmp_path / "x"
    assert cfg.extension == "inc"
    assert cfg.max_blank_lines == 2
    assert cfg.section("missing") == {}
