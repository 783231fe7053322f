"""Naming templates and the project catalog.

A catalog is a TOML document with two sections::

    [aliases]
    hugo = "spf13/hugo"

    [[templates.hugo]]
    range = ">=0.20"
    tarball = "{name}_{version}_Linux-64bit.tar.gz"
    binary = "{name}"

Rules for a project are tried in declared order and the first whose range
contains the version is used, even when a later rule would also match.
Projects without rules use ``DEFAULT_RULE``.
"""

from __future__ import annotations

import string
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from packaging.version import Version

from binrc.core.config import ConfigError, parse_toml
from binrc.core.result import Err, Ok, Result
from binrc.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_table

from .versions import VersionRange

__all__ = [
    "NamingPattern",
    "TemplateRule",
    "TemplateTable",
    "Catalog",
    "DEFAULT_RULE",
    "PLACEHOLDERS",
    "bundled_catalog_path",
    "load_catalog",
]

PLACEHOLDERS = frozenset({"name", "version", "tag"})


@dataclass(frozen=True, slots=True)
class NamingPattern:
    """A file name template with named slots.

    Slots: ``{name}`` (project name), ``{version}`` (version without the
    ``v`` prefix) and ``{tag}`` (version with it).
    """

    template: str

    def __post_init__(self) -> None:
        if not self.template.strip():
            raise ValueError("Naming pattern cannot be empty")
        for _, field_name, _, conversion in string.Formatter().parse(self.template):
            if field_name is None:
                continue
            if field_name not in PLACEHOLDERS:
                raise ValueError(
                    f"Unknown placeholder {{{field_name}}} in {self.template!r}; "
                    f"expected one of {', '.join(sorted(PLACEHOLDERS))}"
                )
            if conversion:
                raise ValueError(f"Conversions are not supported in {self.template!r}")

    def render(self, *, name: str, version: str, tag: str) -> str:
        return self.template.format(name=name, version=version, tag=tag)


@dataclass(frozen=True, slots=True)
class TemplateRule:
    """Archive and in-archive binary names for a range of versions."""

    version_range: VersionRange
    tarball: NamingPattern
    binary: NamingPattern

    def matches(self, version: Version) -> bool:
        return self.version_range.contains(version)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> TemplateRule:
        """Build a rule from a catalog table.

        Raises:
            ValueError: On missing keys, bad range or bad pattern
        """
        tarball = get_str(data, "tarball")
        binary = get_str(data, "binary")
        if tarball is None or binary is None:
            raise ValueError("template rule needs both 'tarball' and 'binary'")
        return cls(
            version_range=VersionRange.parse(get_str(data, "range") or "*"),
            tarball=NamingPattern(tarball),
            binary=NamingPattern(binary),
        )


DEFAULT_RULE = TemplateRule(
    version_range=VersionRange.any(),
    tarball=NamingPattern("{name}_v{version}_Linux-64bit.tar.gz"),
    binary=NamingPattern("{name}_{version}_linux_amd64/{name}_{version}_linux_amd64"),
)


def _no_rules() -> dict[str, tuple[TemplateRule, ...]]:
    return {}


@dataclass(frozen=True)
class TemplateTable:
    """Ordered naming rules keyed by project name."""

    rules: Mapping[str, tuple[TemplateRule, ...]] = field(default_factory=_no_rules)

    def rules_for(self, name: str) -> tuple[TemplateRule, ...]:
        return tuple(self.rules.get(name, ()))

    def select(self, name: str, version: Version) -> TemplateRule | None:
        """Pick the rule for ``name`` at ``version``.

        Returns:
            The first matching rule, ``DEFAULT_RULE`` if the project has no
            rules, or None if it has rules and none matches
        """
        rules = self.rules_for(name)
        if not rules:
            return DEFAULT_RULE
        for rule in rules:
            if rule.matches(version):
                return rule
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> TemplateTable:
        rules: dict[str, tuple[TemplateRule, ...]] = {}
        for project, entries in data.items():
            items = as_obj_list(entries)
            if items is None:
                raise ValueError(f"templates.{project} must be an array of tables")
            parsed: list[TemplateRule] = []
            for index, item in enumerate(items):
                table = as_str_dict(item)
                if table is None:
                    raise ValueError(f"templates.{project}[{index}] must be a table")
                try:
                    parsed.append(TemplateRule.from_dict(table))
                except ValueError as e:
                    raise ValueError(f"templates.{project}[{index}]: {e}") from e
            rules[project] = tuple(parsed)
        return cls(rules=rules)


def _no_aliases() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class Catalog:
    """Template table plus alias table, loaded together."""

    templates: TemplateTable = field(default_factory=TemplateTable)
    aliases: Mapping[str, str] = field(default_factory=_no_aliases)

    def merged(self, other: Catalog) -> Catalog:
        """Overlay ``other``: its rules replace ours per project, aliases merge."""
        rules = {**self.templates.rules, **other.templates.rules}
        aliases = {**self.aliases, **other.aliases}
        return Catalog(templates=TemplateTable(rules=rules), aliases=aliases)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Catalog:
        """Create a Catalog from parsed TOML.

        Raises:
            ValueError: If any section is malformed
        """
        aliases_raw: StrDict = get_table(data, "aliases") or {}
        aliases: dict[str, str] = {}
        for short, full in aliases_raw.items():
            if not isinstance(full, str) or full.strip("/").count("/") < 1:
                raise ValueError(f"alias {short!r} must map to 'owner/name'")
            aliases[short] = full.strip("/")

        if "templates" in data and get_table(data, "templates") is None:
            raise ValueError("'templates' must be a table")
        templates = TemplateTable.from_dict(get_table(data, "templates") or {})
        return cls(templates=templates, aliases=aliases)


def bundled_catalog_path() -> Path:
    return Path(__file__).parent.parent / "data" / "templates.toml"


def load_catalog(path: Path) -> Result[Catalog, ConfigError]:
    """Load a catalog file.

    Args:
        path: Path to a catalog TOML file

    Returns:
        Ok(Catalog), or Err(ConfigError) naming the file and the problem
    """
    result = parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Catalog.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid catalog: {e}", path=path))
