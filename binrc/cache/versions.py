"""Version parsing and range constraints for template selection.

Versions are compared with ``packaging`` semantics, which order dotted
numeric releases the usual way (``0.9 < 0.10 < 0.68.3``).

Range expressions accepted in catalogs:
- comparison clauses, comma separated: ``>=0.20``, ``>= 0.20, < 0.30``
- wildcard equality: ``==0.15.*``
- hyphen ranges, inclusive: ``0.20 - 0.30``
- ``*`` or an empty string for any version
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

__all__ = ["VersionRange", "InvalidVersionText", "parse_version"]

_HYPHEN_RANGE = re.compile(r"^\s*([0-9][^\s,]*)\s+-\s+([0-9][^\s,]*)\s*$")
_BARE_VERSION = re.compile(r"^[0-9]")


class InvalidVersionText(ValueError):
    """Raised when a version string cannot be parsed."""


def parse_version(text: str) -> Version:
    """Parse a clean (no ``v`` prefix) version string.

    Raises:
        InvalidVersionText: If ``text`` is not a valid version
    """
    try:
        return Version(text)
    except InvalidVersion as e:
        raise InvalidVersionText(str(e)) from e


def _normalize_clause(clause: str) -> str:
    clause = clause.strip()
    # A bare version means an exact pin.
    if _BARE_VERSION.match(clause):
        return f"=={clause}"
    return re.sub(r"^([<>=!~]+)\s+", r"\1", clause)


@dataclass(frozen=True, slots=True)
class VersionRange:
    """A parsed version constraint.

    Attributes:
        expression: The expression as written in the catalog
        specifiers: The parsed constraint
    """

    expression: str
    specifiers: SpecifierSet

    @classmethod
    def any(cls) -> VersionRange:
        return cls(expression="*", specifiers=SpecifierSet())

    @classmethod
    def parse(cls, expression: str) -> VersionRange:
        """Parse a range expression.

        Raises:
            ValueError: If the expression is not a valid constraint
        """
        text = expression.strip()
        if text in ("", "*"):
            return cls(expression=text or "*", specifiers=SpecifierSet())

        hyphen = _HYPHEN_RANGE.match(text)
        if hyphen:
            low, high = hyphen.groups()
            spec = f">={low},<={high}"
        else:
            spec = ",".join(_normalize_clause(c) for c in text.split(","))

        try:
            return cls(expression=text, specifiers=SpecifierSet(spec))
        except InvalidSpecifier as e:
            raise ValueError(f"invalid version range {expression!r}: {e}") from e

    def contains(self, version: Version) -> bool:
        # Pre-release tags are pinned explicitly by users, so match them.
        return self.specifiers.contains(version, prereleases=True)

    def __str__(self) -> str:
        return self.expression
