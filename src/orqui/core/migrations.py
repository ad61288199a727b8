"""
Explicit, versioned schema migrations for contract documents.

Older layout contracts were upgraded implicitly on read by the editor. Here each
upgrade is a registered, pure step between two schema versions, and documents are
migrated once, on import, by walking the registered steps in order.

Registered steps
----------------
| Schema           | From  | To    | Changes                                               |
|------------------|-------|-------|-------------------------------------------------------|
| layout-contract  | 1.0.0 | 2.0.0 | legacy single header CTA → ``ctas`` list;             |
|                  |       |       | "ctas" order entry → one "cta:<id>" entry per CTA;    |
|                  |       |       | ids assigned to sidebar nav items missing one         |

Notes
- A step applies to any document whose version v satisfies source <= v < target.
- Versions sharing the target's major are read as-is (minor/patch bumps are additive).
- Steps never mutate their input and return a human-readable change log.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import VersionMismatch
from .grammar import ContractSchema, schema_from_value
from .typing import JsonDict
from .versioning import SchemaVersion, current_version, is_successor_of

__all__ = [
    "Migration",
    "MigrationResult",
    "register_migration",
    "migrations_for",
    "migrate",
    "migrate_layout",
]

logger = logging.getLogger(__name__)

StepFn = Callable[[JsonDict], list[str]]


@dataclass(frozen=True)
class Migration:
    """
    One registered upgrade step.

    Attributes:
        schema (ContractSchema): Contract schema the step applies to.
        source (SchemaVersion): Lowest version the step accepts.
        target (SchemaVersion): Version the document has after the step.
        description (str): Short summary for logs.
        step (StepFn): Function editing a private deep copy in place and returning
            its change log.
    """

    schema: ContractSchema
    source: SchemaVersion
    target: SchemaVersion
    description: str
    step: StepFn

    def accepts(self, version: SchemaVersion) -> bool:
        return self.source <= version.release < self.target


@dataclass(frozen=True)
class MigrationResult:
    """
    Outcome of migrate.

    Attributes:
        document (JsonDict): Migrated document (a new object).
        version (SchemaVersion): Version the document now conforms to.
        log (list[str]): Changes applied, in order.
    """

    document: JsonDict
    version: SchemaVersion
    log: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.log)


_REGISTRY: list[Migration] = []


def register_migration(
    schema: ContractSchema, source: str, target: str, description: str
) -> Callable[[StepFn], StepFn]:
    """
    Decorator registering a migration step.

    Raises:
        ValueError: If ``target`` is not the immediate semver successor of ``source``.
    """
    src = SchemaVersion.parse(source)
    dst = SchemaVersion.parse(target)
    if not is_successor_of(dst, src):
        raise ValueError(f"migration target {dst} is not the successor of {src}")

    def decorator(fn: StepFn) -> StepFn:
        _REGISTRY.append(Migration(schema, src, dst, description, fn))
        _REGISTRY.sort(key=lambda m: (m.schema.value, m.source))
        return fn

    return decorator


def migrations_for(schema: ContractSchema | str) -> list[Migration]:
    """Registered steps for ``schema`` in ascending source order."""
    kind = schema_from_value(schema)
    return [m for m in _REGISTRY if m.schema is kind]


def _as_version(value: SchemaVersion | str) -> SchemaVersion:
    return value if isinstance(value, SchemaVersion) else SchemaVersion.parse(value)


def migrate(
    document: Mapping[str, Any],
    schema: ContractSchema | str,
    from_version: SchemaVersion | str,
    to_version: SchemaVersion | str | None = None,
) -> MigrationResult:
    """
    Upgrade a document from ``from_version`` to ``to_version``.

    Args:
        document (Mapping[str, Any]): Unwrapped contract document.
        schema (ContractSchema | str): Contract schema of the document.
        from_version (SchemaVersion | str): Version recorded in the envelope.
        to_version (SchemaVersion | str | None): Target; defaults to the schema's
            current version.

    Returns:
        MigrationResult: Migrated copy, reached version, and change log.

    Raises:
        orqui.core.errors.VersionMismatch: If the document is newer than the
            target or no registered step covers a major-version gap.
        ValueError: If a version string is not semver.
    """
    kind = schema_from_value(schema)
    version = _as_version(from_version)
    target = current_version(kind) if to_version is None else _as_version(to_version)
    if version > target:
        raise VersionMismatch(f"{kind.value} {version} is newer than supported {target}")

    doc: JsonDict = copy.deepcopy(dict(document))
    log: list[str] = []
    steps = migrations_for(kind)
    while version.major < target.major:
        step = next((m for m in steps if m.accepts(version)), None)
        if step is None:
            raise VersionMismatch(f"no migration for {kind.value} from {version} towards {target}")
        changes = step.step(doc)
        logger.debug("migrated %s %s -> %s: %s", kind.value, version, step.target, step.description)
        log.extend(changes)
        version = step.target
    return MigrationResult(document=doc, version=target, log=log)


def migrate_layout(
    document: Mapping[str, Any],
    from_version: SchemaVersion | str,
    to_version: SchemaVersion | str | None = None,
) -> MigrationResult:
    """Shorthand for ``migrate(document, ContractSchema.LAYOUT_CONTRACT, ...)``."""
    return migrate(document, ContractSchema.LAYOUT_CONTRACT, from_version, to_version)


# ============================================================================
# layout-contract 1.x -> 2.0.0
# ============================================================================

LEGACY_CTA_ID = "cta-legacy"


def _expand_legacy_cta(header_elements: JsonDict) -> list[str]:
    log: list[str] = []
    cta = header_elements.get("cta")
    ctas = header_elements.get("ctas")
    if not isinstance(ctas, list):
        ctas = []
    if isinstance(cta, Mapping) and cta.get("enabled") and not ctas:
        legacy: JsonDict = {
            "id": LEGACY_CTA_ID,
            "label": cta.get("label") or "New",
            "variant": cta.get("variant") or "default",
            "route": cta.get("route") or "",
        }
        if cta.get("icon"):
            legacy["icon"] = cta["icon"]
        ctas = [legacy]
        header_elements["cta"] = {**cta, "enabled": False}
        log.append(f"headerElements: expanded legacy single CTA into ctas[{LEGACY_CTA_ID}]")
    if ctas or "ctas" in header_elements:
        header_elements["ctas"] = ctas

    order = header_elements.get("order")
    if isinstance(order, list):
        ids = [f"cta:{c['id']}" for c in ctas if isinstance(c, Mapping) and c.get("id")]
        expanded: list[Any] = []
        for entry in order:
            if entry == "ctas":
                expanded.extend(ids)
            else:
                expanded.append(entry)
        expanded.extend(i for i in ids if i not in expanded)
        if expanded != order:
            header_elements["order"] = expanded
            log.append("headerElements: expanded grouped 'ctas' order entry into per-CTA entries")
    return log


def _assign_nav_ids(navigation: JsonDict) -> list[str]:
    items = navigation.get("items")
    if not isinstance(items, list):
        return []
    log: list[str] = []
    fixed: list[Any] = []
    for i, item in enumerate(items):
        if isinstance(item, Mapping) and not item.get("id"):
            item = {**item, "id": f"nav-legacy-{i}"}
            log.append(f"navigation: assigned id nav-legacy-{i}")
        fixed.append(item)
    navigation["items"] = fixed
    return log


@register_migration(
    ContractSchema.LAYOUT_CONTRACT,
    "1.0.0",
    "2.0.0",
    "multi-CTA header elements and stable nav item ids",
)
def _layout_v1_to_v2(doc: JsonDict) -> list[str]:
    log: list[str] = []
    structure = doc.get("structure")
    if not isinstance(structure, dict):
        return log
    header_elements = structure.get("headerElements")
    if isinstance(header_elements, dict):
        log.extend(_expand_legacy_cta(header_elements))
    regions = structure.get("regions")
    sidebar = regions.get("sidebar") if isinstance(regions, dict) else None
    navigation = sidebar.get("navigation") if isinstance(sidebar, dict) else None
    if isinstance(navigation, dict):
        log.extend(_assign_nav_ids(navigation))
    return log
