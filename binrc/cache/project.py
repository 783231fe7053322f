"""Project identifiers and version strings to canonical descriptors.

``ProjectResolver`` turns what the user typed (``hugo``, ``spf13/hugo``,
``0.68.3``, ``v0.68.3``) into a ``Project`` with its naming rule already
selected. Resolution touches neither the network nor the filesystem.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from binrc.core.result import Err, Ok, Result

from .errors import (
    InvalidVersion,
    NoMatchingTemplate,
    ResolveError,
    UnknownProject,
    UnknownVersion,
)
from .templates import TemplateRule, TemplateTable
from .versions import InvalidVersionText, parse_version

__all__ = ["Project", "ProjectResolver", "version_env_var"]


@dataclass(frozen=True, slots=True)
class Project:
    """A resolved project at a pinned version.

    Attributes:
        full_name: ``owner/name``
        version: Version as tagged on the release host, always ``v``-prefixed
        clean_version: Version without any leading ``v``
        owner: Repository owner
        name: Repository name, also the installed binary's file name
        rule: Naming rule selected for this version
        path: Installed binary, set once it is known to exist
    """

    full_name: str
    version: str
    clean_version: str
    owner: str
    name: str
    rule: TemplateRule
    path: Path | None = None

    @property
    def tarball_name(self) -> str:
        return self.rule.tarball.render(
            name=self.name, version=self.clean_version, tag=self.version
        )

    @property
    def binary_name(self) -> str:
        """Path of the executable inside the extracted archive."""
        return self.rule.binary.render(
            name=self.name, version=self.clean_version, tag=self.version
        )

    def with_path(self, path: Path) -> Project:
        return dataclasses.replace(self, path=path)

    def __str__(self) -> str:
        return f"{self.full_name}@{self.version}"


def version_env_var(name: str) -> str:
    """Environment variable consulted when no version is given."""
    return f"{name.upper()}_VERSION"


class ProjectResolver:
    """Resolves identifiers against a template table and alias table.

    Usage:
        resolver = ProjectResolver(catalog.templates, catalog.aliases)
        result = resolver.resolve("hugo", "0.68.3")
        if is_ok(result):
            print(result.value.tarball_name)
    """

    def __init__(
        self,
        templates: TemplateTable,
        aliases: Mapping[str, str],
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            templates: Naming rules per project name
            aliases: Short name -> ``owner/name``
            environ: Source of ``{NAME}_VERSION`` fallbacks (default: os.environ)
        """
        self._templates = templates
        self._aliases = dict(aliases)
        self._environ = os.environ if environ is None else environ

    @property
    def templates(self) -> TemplateTable:
        return self._templates

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def resolve(self, identifier: str, version: str = "") -> Result[Project, ResolveError]:
        """Resolve an identifier and version to a Project.

        Args:
            identifier: ``owner/name`` or a known alias
            version: Release version, with or without ``v``; empty to use
                the ``{NAME}_VERSION`` environment variable

        Returns:
            Ok with Project, or Err with the first resolution failure
        """
        name_result = self._full_name(identifier)
        if isinstance(name_result, Err):
            return name_result
        full_name = name_result.value
        owner, name = full_name.split("/", 1)

        version = version.strip()
        if not version:
            env_var = version_env_var(name)
            version = self._environ.get(env_var, "").strip()
            if not version:
                return Err(UnknownVersion(project=full_name, env_var=env_var))

        if not version.startswith("v"):
            version = "v" + version
        clean_version = version.lstrip("v")

        try:
            parsed = parse_version(clean_version)
        except InvalidVersionText as e:
            return Err(InvalidVersion(project=full_name, version=version, reason=str(e)))

        rule = self._templates.select(name, parsed)
        if rule is None:
            ranges = tuple(str(r.version_range) for r in self._templates.rules_for(name))
            return Err(NoMatchingTemplate(project=full_name, version=version, ranges=ranges))

        return Ok(
            Project(
                full_name=full_name,
                version=version,
                clean_version=clean_version,
                owner=owner,
                name=name,
                rule=rule,
            )
        )

    def _full_name(self, identifier: str) -> Result[str, UnknownProject]:
        trimmed = identifier.strip().strip("/")
        if "/" not in trimmed:
            full = self._aliases.get(trimmed)
            if full is None:
                return Err(
                    UnknownProject(identifier=identifier, aliases=tuple(sorted(self._aliases)))
                )
            trimmed = full

        # Segments become store directories; empty or dot segments would
        # escape or collapse the layout.
        if any(part in ("", ".", "..") for part in trimmed.split("/")):
            return Err(UnknownProject(identifier=identifier, aliases=tuple(sorted(self._aliases))))
        return Ok(trimmed)
