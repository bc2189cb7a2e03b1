"""Rewrite rule sets.

A rule set bundles everything the rewriter needs for one migration:

- an ordered :class:`MappingTable` of legacy -> modern identifier rules,
  where ``manual`` rules are reported but never replaced
- the names of legacy loader calls (``jimport('...')``) to strip
- the :class:`ImportBlock` to inject and its presence signature
- the :class:`GuardMarker` that anchors the injection

Rule sets are YAML files validated against ``rules.schema.yaml``. They are
looked up by name in ``<repo-root>/.refit/rules/`` first, then in the
bundled ``refit.data/rules/``; a path to a YAML file is accepted as well.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Pattern, Tuple

import yaml

from refit.core.config.manager import get_project_config_dir
from refit.core.exceptions import RuleSetError
from refit.core.schemas import SchemaValidationError, validate_payload
from refit.core.utils.io import iter_yaml_files, read_yaml, resolve_yaml_path
from refit.data import get_data_path

from .tokens import contains_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRule:
    legacy: str
    modern: str
    manual: bool = False


class MappingTable:
    """Immutable, ordered sequence of :class:`RewriteRule`.

    Construction fails when a legacy identifier is listed twice, or when an
    automatic rule's replacement would itself contain a legacy identifier
    that another automatic rule rewrites (the output would then depend on
    rule order and a second run would change it again).
    """

    def __init__(self, rules: Iterable[RewriteRule]) -> None:
        self._rules: Tuple[RewriteRule, ...] = tuple(rules)
        self._check()

    def _check(self) -> None:
        seen: set[str] = set()
        for rule in self._rules:
            if rule.legacy in seen:
                raise RuleSetError(
                    f"Duplicate legacy identifier in mapping table: {rule.legacy}",
                    context={"legacy": rule.legacy},
                )
            seen.add(rule.legacy)

        automatic = self.automatic
        for rule in automatic:
            for other in automatic:
                if contains_token(rule.modern, other.legacy):
                    raise RuleSetError(
                        f"Replacement for {rule.legacy} ({rule.modern!r}) reintroduces "
                        f"legacy identifier {other.legacy}",
                        context={"legacy": rule.legacy, "conflict": other.legacy},
                    )

    @property
    def rules(self) -> Tuple[RewriteRule, ...]:
        return self._rules

    @property
    def automatic(self) -> Tuple[RewriteRule, ...]:
        """Rules applied by the rewriter, in table order."""
        return tuple(r for r in self._rules if not r.manual)

    @property
    def manual(self) -> Tuple[RewriteRule, ...]:
        """Rules left for manual follow-up."""
        return tuple(r for r in self._rules if r.manual)

    def __iter__(self) -> Iterator[RewriteRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"MappingTable({len(self._rules)} rules)"


@dataclass(frozen=True)
class ImportBlock:
    """Declarations to inject, deduplicated in first-seen order."""

    signature: str
    statements: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "statements", tuple(dict.fromkeys(self.statements)))
        if not self.statements:
            raise RuleSetError("Import block must contain at least one statement")
        if self.signature not in self.render():
            # Otherwise a second run would inject the block again.
            raise RuleSetError(
                f"Import block does not contain its presence signature {self.signature!r}",
                context={"signature": self.signature},
            )

    def render(self) -> str:
        """Text inserted after the guard: a separating blank line, one declaration per line."""
        return "\n" + "\n".join(self.statements) + "\n"

    def is_present(self, content: str) -> bool:
        return self.signature in content


@dataclass(frozen=True)
class GuardMarker:
    pattern: str

    def __post_init__(self) -> None:
        try:
            re.compile(self.pattern)
        except re.error as exc:
            raise RuleSetError(
                f"Invalid guard pattern {self.pattern!r}: {exc}",
                context={"pattern": self.pattern},
            ) from exc

    @property
    def regex(self) -> Pattern[str]:
        return re.compile(self.pattern)

    def search(self, content: str) -> Optional[re.Match[str]]:
        return self.regex.search(content)


@dataclass(frozen=True)
class RuleSet:
    name: str
    extension: str
    table: MappingTable
    imports: ImportBlock
    guard: GuardMarker
    import_calls: Tuple[str, ...] = ()
    description: str = ""
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: Optional[Path] = None) -> "RuleSet":
        """Validate and build a rule set from its YAML mapping."""
        where = str(source) if source else "<inline>"
        try:
            validate_payload(data, "rules")
        except SchemaValidationError as exc:
            raise RuleSetError(
                f"Invalid rule set {where}: {exc}",
                context={"source": where, "errors": exc.errors},
            ) from exc

        table = MappingTable(
            RewriteRule(
                legacy=str(item["legacy"]),
                modern=str(item["modern"]),
                manual=bool(item.get("manual", False)),
            )
            for item in data.get("identifiers") or []
        )
        imports = data["imports"]
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            extension=str(data["extension"]),
            table=table,
            imports=ImportBlock(
                signature=str(imports["signature"]),
                statements=tuple(str(s) for s in imports["statements"]),
            ),
            guard=GuardMarker(pattern=str(data["guard"]["pattern"])),
            import_calls=tuple(dict.fromkeys(str(c) for c in data.get("import_calls") or [])),
            source=source,
        )

    @classmethod
    def from_file(cls, path: Path) -> "RuleSet":
        path = Path(path)
        try:
            data = read_yaml(path, default=None, raise_on_error=True)
        except FileNotFoundError as exc:
            raise RuleSetError(f"Rule set file not found: {path}", context={"source": str(path)}) from exc
        except yaml.YAMLError as exc:
            raise RuleSetError(f"Invalid YAML in rule set {path}: {exc}", context={"source": str(path)}) from exc
        if not isinstance(data, dict):
            raise RuleSetError(f"Rule set must be a YAML mapping: {path}", context={"source": str(path)})
        return cls.from_dict(data, source=path)


def _rule_dirs(repo_root: Optional[Path]) -> List[Path]:
    dirs: List[Path] = []
    if repo_root is not None:
        dirs.append(get_project_config_dir(repo_root) / "rules")
    dirs.append(get_data_path("rules"))
    return dirs


def available_rule_sets(repo_root: Optional[Path] = None) -> List[str]:
    """Names of every rule set visible from ``repo_root`` (project + bundled)."""
    names: Dict[str, None] = {}
    for d in _rule_dirs(repo_root):
        for path in iter_yaml_files(d):
            names.setdefault(path.stem, None)
    return sorted(names)


def load_rule_set(name_or_path: str | Path, repo_root: Optional[Path] = None) -> RuleSet:
    """Resolve a rule set by name or path and load it.

    Raises:
        RuleSetError: If no rule set is found or it is invalid.
    """
    raw = str(name_or_path)
    candidate = Path(raw).expanduser()
    if candidate.suffix in (".yaml", ".yml") or "/" in raw:
        if not candidate.is_absolute() and repo_root is not None:
            candidate = Path(repo_root) / candidate
        logger.debug("Loading rule set from %s", candidate)
        return RuleSet.from_file(candidate)

    for d in _rule_dirs(repo_root):
        found = resolve_yaml_path(d / raw)
        if found is not None:
            logger.debug("Loading rule set %s from %s", raw, found)
            return RuleSet.from_file(found)

    available = ", ".join(available_rule_sets(repo_root)) or "none"
    raise RuleSetError(
        f"Unknown rule set: {raw} (available: {available})",
        context={"rules": raw},
    )


__all__ = [
    "RewriteRule",
    "MappingTable",
    "ImportBlock",
    "GuardMarker",
    "RuleSet",
    "available_rule_sets",
    "load_rule_set",
]
