"""
Semantic version metadata and helpers for contract envelopes and migrations.

Exposes the current version of each contract schema and provides parsing,
ordering, compatibility, and successor checks. This module is zero-IO.

Notes:
    - Envelopes carry a "<major>.<minor>.<patch>[-pre][+build]" version string.
    - The migration runner uses is_successor_of to chain upgrade steps.
    - Tests assert CURRENT_VERSIONS covers every ContractSchema member.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering

from .grammar import ContractSchema

__all__ = [
    "SchemaVersion",
    "CURRENT_VERSIONS",
    "current_version",
    "is_compatible",
    "is_successor_of",
]

_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+({_IDENT}(?:\.{_IDENT})*))?$"
)


def _prerelease_key(prerelease: str) -> tuple:
    # Numeric identifiers sort numerically and before alphanumeric ones.
    return tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in prerelease.split("."))


@total_ordering
@dataclass(frozen=True)
class SchemaVersion:
    """
    Immutable semantic version for contract documents.

    Attributes:
        major (int): Non-negative major component signalling breaking changes.
        minor (int): Non-negative minor component for additive, non-breaking changes.
        patch (int): Non-negative patch component.
        prerelease (str): Dot-separated pre-release identifiers ("" for a release).
        build (str): Build metadata; kept for display, ignored by equality and ordering.

    Notes:
        Ordering follows semver precedence: a pre-release sorts before its release,
        so 2.0.0-rc.1 < 2.0.0.

    Raises:
        ValueError: If any component is negative.
    """

    major: int
    minor: int
    patch: int = 0
    prerelease: str = ""
    build: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"SchemaVersion {name} must be non-negative, got {value}")

    @classmethod
    def parse(cls, text: str) -> SchemaVersion:
        """
        Parse a semver string such as "2.0.0" or "1.0.0-beta.1+build.5".

        Raises:
            ValueError: If ``text`` is not a semantic version string.

        Examples:
            >>> SchemaVersion.parse("2.1.3")
            SchemaVersion(major=2, minor=1, patch=3, prerelease='', build='')
            >>> str(SchemaVersion.parse("1.0.0-beta.1"))
            '1.0.0-beta.1'
        """
        m = _SEMVER_RE.match(text.strip()) if isinstance(text, str) else None
        if m is None:
            raise ValueError(f"SchemaVersion must be a semver string, got {text!r}")
        return cls(
            int(m.group(1)),
            int(m.group(2)),
            int(m.group(3)),
            prerelease=m.group(4) or "",
            build=m.group(5) or "",
        )

    @property
    def release(self) -> SchemaVersion:
        """The version with pre-release and build suffixes stripped."""
        return SchemaVersion(self.major, self.minor, self.patch)

    def _precedence(self) -> tuple:
        release = (self.major, self.minor, self.patch)
        if not self.prerelease:
            return (release, 1, ())
        return (release, 0, _prerelease_key(self.prerelease))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SchemaVersion):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


CURRENT_VERSIONS: dict[ContractSchema, SchemaVersion] = {
    ContractSchema.LAYOUT_CONTRACT: SchemaVersion(2, 0, 0),
    ContractSchema.UI_REGISTRY_CONTRACT: SchemaVersion(1, 0, 0),
}


def current_version(schema: ContractSchema) -> SchemaVersion:
    """Return the version newly exported contracts of ``schema`` are stamped with."""
    return CURRENT_VERSIONS[schema]


def is_compatible(ver: SchemaVersion, schema: ContractSchema) -> bool:
    """
    Check whether a version can be read without migration.

    Returns:
        bool: True if ver shares the major component with the current version of
        ``schema`` and is not newer than it.

    Examples:
        >>> from orqui.core.grammar import ContractSchema
        >>> is_compatible(SchemaVersion(2, 0, 0), ContractSchema.LAYOUT_CONTRACT)
        True
        >>> is_compatible(SchemaVersion(1, 0, 0), ContractSchema.LAYOUT_CONTRACT)
        False
    """
    cur = CURRENT_VERSIONS[schema]
    return ver.major == cur.major and ver <= cur


def is_successor_of(candidate: SchemaVersion, current: SchemaVersion) -> bool:
    """
    Determine whether a version is the immediate successor of another.

    Contract schema updates follow semantic versioning:
      - Patch bumps increase patch by one with major/minor fixed.
      - Minor bumps increase minor by one and reset patch to zero.
      - Major bumps increase major by exactly one and reset minor and patch to zero.

    Examples:
        >>> is_successor_of(SchemaVersion(2, 0, 0), SchemaVersion(1, 4, 2))
        True
        >>> is_successor_of(SchemaVersion(1, 2, 0), SchemaVersion(1, 0, 0))
        False
    """
    if candidate.major == current.major and candidate.minor == current.minor:
        return candidate.patch == current.patch + 1
    if candidate.major == current.major:
        return candidate.minor == current.minor + 1 and candidate.patch == 0
    return candidate.major == current.major + 1 and candidate.minor == 0 and candidate.patch == 0
