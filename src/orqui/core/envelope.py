"""
Contract envelopes: versioned export wrappers and import unwrapping.

Envelope wire shape (flat; meta fields are siblings of the document's fields):

    {
      "schema": "layout-contract" | "ui-registry-contract",
      "version": "<semver>",
      "hash": "sha256:<64 lowercase hex chars>",
      "generatedAt": "<ISO-8601 timestamp>",
      ...documentFields
    }

Responsibilities
- wrap: stamp a document with schema, version, content digest, and timestamp.
- unwrap: check the schema tag and split an envelope into document + meta.
- parse_contract: JSON text → unwrap, mapping parse failures to MalformedInput.
- validate_structure: advisory structural lint; never blocks a save.

Notes
- The hash is advisory provenance, not an integrity gate: unwrap does not
  recompute it unless verify=True is requested explicitly.
- Legacy exports that carried their meta in a nested "$orqui" object are
  accepted by unwrap; they are never produced.
- Zero-IO apart from reading the clock in wrap (injectable via ``now``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .constants import META_FIELDS
from .errors import HashMismatch, MalformedInput
from .grammar import REGION_NAMES, ContractSchema, is_token_ref, schema_from_value
from .hashing import digest
from .schema import EnvelopeMeta, StructureWarning
from .serde import json_loads
from .tokens import resolve_composite, resolve_scalar
from .typing import JsonDict
from .versioning import SchemaVersion

__all__ = [
    "UnwrappedContract",
    "LEGACY_META_KEY",
    "wrap",
    "unwrap",
    "parse_contract",
    "validate_structure",
]

logger = logging.getLogger(__name__)

LEGACY_META_KEY = "$orqui"

# Page override keys that are not region names.
_PAGE_SECTION_KEYS: frozenset[str] = frozenset(
    {"headerElements", "contentLayout", "pageHeader", "gridLayout"}
)


@dataclass(frozen=True)
class UnwrappedContract:
    """
    Result of a successful unwrap.

    Attributes:
        document (JsonDict): Editable document with every envelope field removed.
        meta (EnvelopeMeta): Envelope metadata as recorded.
    """

    document: JsonDict
    meta: EnvelopeMeta

    @property
    def schema(self) -> ContractSchema:
        return self.meta.schema_name


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _strip_meta(document: Mapping[str, Any]) -> JsonDict:
    return {k: v for k, v in document.items() if k not in META_FIELDS and k != LEGACY_META_KEY}


def wrap(
    document: Mapping[str, Any],
    schema_name: ContractSchema | str,
    version: SchemaVersion | str,
    *,
    now: Callable[[], datetime] | None = None,
) -> JsonDict:
    """
    Wrap a document in a fresh contract envelope.

    Args:
        document (Mapping[str, Any]): Editable document (layout or registry).
        schema_name (ContractSchema | str): Contract schema of the document.
        version (SchemaVersion | str): Semantic version to stamp.
        now (Callable[[], datetime] | None): Clock override; defaults to UTC now.

    Returns:
        JsonDict: Envelope with meta fields first, followed by the document fields.

    Raises:
        orqui.core.errors.SchemaMismatch: If ``schema_name`` is not a known schema.
        ValueError: If ``version`` is not a semantic version string.

    Notes:
        Any envelope field already present in ``document`` is dropped before
        hashing; the envelope is always constructed fresh.

    Examples:
        >>> env = wrap({"tokens": {}}, "layout-contract", "2.0.0")
        >>> list(env)[:4]
        ['schema', 'version', 'hash', 'generatedAt']
    """
    schema = schema_from_value(schema_name)
    ver = version if isinstance(version, SchemaVersion) else SchemaVersion.parse(version)
    body = _strip_meta(document)
    if len(body) != len(document):
        logger.warning(
            "wrap: dropping envelope fields already present in the %s document", schema.value
        )
    meta = EnvelopeMeta(
        schema=schema,
        version=str(ver),
        hash=digest(body),
        generatedAt=_iso_timestamp((now or _utc_now)()),
    )
    return {**meta.to_wire(), **body}


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def unwrap(envelope: Any, *, verify: bool = False) -> UnwrappedContract:
    """
    Validate an envelope's schema tag and strip its meta fields.

    Args:
        envelope (Any): Parsed envelope object.
        verify (bool): Recompute the digest and compare it with the recorded hash.

    Returns:
        UnwrappedContract: Document without envelope fields, plus the meta.

    Raises:
        orqui.core.errors.MalformedInput: If ``envelope`` is not an object.
        orqui.core.errors.SchemaMismatch: If the schema tag is missing or unknown.
        orqui.core.errors.HashMismatch: If ``verify`` is set and the hashes differ.

    Examples:
        >>> u = unwrap(wrap({"components": {}}, "ui-registry-contract", "1.0.0"))
        >>> u.document, u.schema.value
        ({'components': {}}, 'ui-registry-contract')
    """
    if not isinstance(envelope, Mapping):
        raise MalformedInput(f"contract envelope must be a JSON object, got {type(envelope).__name__}")

    source: Mapping[str, Any] = envelope
    legacy = envelope.get(LEGACY_META_KEY)
    if "schema" not in envelope and isinstance(legacy, Mapping):
        source = legacy

    schema = schema_from_value(source.get("schema"))
    meta = EnvelopeMeta(
        schema=schema,
        version=_opt_str(source.get("version")),
        hash=_opt_str(source.get("hash")),
        generatedAt=_opt_str(source.get("generatedAt")),
    )
    document = _strip_meta(envelope)
    if verify:
        actual = digest(document)
        if meta.hash != actual:
            raise HashMismatch(meta.hash, actual)
    return UnwrappedContract(document=document, meta=meta)


def parse_contract(text: str | bytes, *, verify: bool = False) -> UnwrappedContract:
    """
    Parse contract JSON text and unwrap it.

    Raises:
        orqui.core.errors.MalformedInput: If the text is not valid JSON or not an object.
        orqui.core.errors.SchemaMismatch: If the schema tag is missing or unknown.
        orqui.core.errors.HashMismatch: If ``verify`` is set and the hashes differ.
    """
    return unwrap(json_loads(text), verify=verify)


def _check_refs(
    mapping: Any, tokens: Any, path: str, warnings: list[StructureWarning]
) -> None:
    if not isinstance(mapping, Mapping):
        return
    for key, ref in mapping.items():
        if is_token_ref(ref) and resolve_scalar(ref, tokens) is None:
            warnings.append(StructureWarning(path=f"{path}.{key}", message=f"unresolved token {ref}"))


def _validate_layout(doc: Mapping[str, Any]) -> list[StructureWarning]:
    warnings: list[StructureWarning] = []
    structure = doc.get("structure")
    structure = structure if isinstance(structure, Mapping) else {}
    regions = structure.get("regions")
    tokens = doc.get("tokens")

    if not isinstance(regions, Mapping):
        warnings.append(StructureWarning(path="structure.regions", message="missing regions"))
        regions = {}
    if not isinstance(tokens, Mapping):
        warnings.append(StructureWarning(path="tokens", message="missing tokens"))

    for name, region in regions.items():
        if not isinstance(region, Mapping):
            continue
        for sub in ("dimensions", "padding"):
            _check_refs(region.get(sub), tokens, f"structure.regions.{name}.{sub}", warnings)

    styles = doc.get("textStyles")
    if isinstance(styles, Mapping):
        for style_name, style in styles.items():
            if not isinstance(style, Mapping):
                continue
            resolved = resolve_composite(style, tokens)
            for field_name, value in style.items():
                if is_token_ref(value) and field_name not in resolved:
                    warnings.append(
                        StructureWarning(
                            path=f"textStyles.{style_name}.{field_name}",
                            message=f"unresolved token {value}",
                        )
                    )

    pages: list[tuple[str, Any]] = []
    for where, container in (("structure.pages", structure.get("pages")), ("pages", doc.get("pages"))):
        if isinstance(container, Mapping):
            pages.extend((f"{where}.{page_id}", page) for page_id, page in container.items())
    for path, page in pages:
        if not isinstance(page, Mapping):
            warnings.append(StructureWarning(path=path, message="page is not an object"))
            continue
        if not page.get("label"):
            warnings.append(StructureWarning(path=path, message="page has no label"))
        if not page.get("route"):
            warnings.append(StructureWarning(path=path, message="page has no route"))
        overrides = page.get("overrides")
        if isinstance(overrides, Mapping):
            for key in overrides:
                if key not in REGION_NAMES and key not in _PAGE_SECTION_KEYS:
                    warnings.append(
                        StructureWarning(
                            path=f"{path}.overrides.{key}",
                            message="override targets an unknown region",
                        )
                    )
    return warnings


def _validate_registry(doc: Mapping[str, Any]) -> list[StructureWarning]:
    components = doc.get("components")
    if not isinstance(components, Mapping):
        return [StructureWarning(path="components", message="missing components")]
    return [
        StructureWarning(path=f"components.{key}", message="component definition is not an object")
        for key, definition in components.items()
        if not isinstance(definition, Mapping)
    ]


def validate_structure(
    document: Any, schema: ContractSchema | str = ContractSchema.LAYOUT_CONTRACT
) -> list[StructureWarning]:
    """
    Collect non-fatal structural warnings for a document.

    Args:
        document (Any): Layout or registry document (envelope fields optional).
        schema (ContractSchema | str): Which contract rules to apply.

    Returns:
        list[StructureWarning]: Findings in document order; empty when clean.

    Raises:
        orqui.core.errors.SchemaMismatch: If ``schema`` is not a known schema.

    Notes:
        Advisory only: callers surface the warnings but still save.
    """
    kind = schema_from_value(schema)
    if not isinstance(document, Mapping):
        return [StructureWarning(path="", message="document is not an object")]
    if kind is ContractSchema.UI_REGISTRY_CONTRACT:
        return _validate_registry(document)
    return _validate_layout(document)
