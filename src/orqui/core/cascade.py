"""
Override cascade: effective structural documents from a base plus per-page overrides.

Responsibilities
- Represent sparse page overrides explicitly: every overridden field is wrapped in
  `Set(value)`; a field that is not overridden reads as `UNSET`. Presence, not
  truthiness, carries meaning: `Set(False)` overrides to False, `UNSET` inherits.
- effective_region: merge one region override onto its base region.
- effective_document: merge a page's overrides onto a whole structural document
  (every region, header elements, content layout, page header, grid layout).
- resolve_page_layout: the same, starting from a full layout contract and a page id.

Merge policy
------------
- Top-level fields present in an override replace the base field wholesale.
- Known nested maps merge one level deeper, key by key:
    regions:         behavior, dimensions, padding
    headerElements:  search, cta, icons
    contentLayout:   grid
  Sibling inner keys not named by the override fall back to the base map.
- A page's gridLayout override replaces structure.gridLayout wholesale.
- Fields absent from an override fall back to the base unchanged.
- Merging always targets the base document, so re-applying an override to its own
  result is a no-op, and an empty override is the identity.

Notes
- Total: malformed overrides (non-mapping values where a mapping is expected)
  are treated as "no override"; nothing here raises.
- Zero-IO; returns new dicts and never mutates inputs.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from .constants import NESTED_MERGE_FIELDS
from .grammar import HEADER_ELEMENT_NAMES, REGION_NAMES
from .typing import JsonDict, PageId

__all__ = [
    "UNSET",
    "Unset",
    "Set",
    "Patch",
    "PageOverrides",
    "effective_region",
    "effective_document",
    "page_overrides",
    "resolve_page_layout",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

HEADER_ELEMENTS_KEY = "headerElements"
CONTENT_LAYOUT_KEY = "contentLayout"
PAGE_HEADER_KEY = "pageHeader"
GRID_LAYOUT_KEY = "gridLayout"

_CONTENT_LAYOUT_NESTED: frozenset[str] = frozenset({"grid"})


class Unset:
    """Marker type for a field the override does not touch."""

    _instance: Unset | None = None

    def __new__(cls) -> Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset()


@dataclass(frozen=True)
class Set(Generic[T]):
    """An overridden field; ``value`` may be falsy and still overrides."""

    value: T


def _empty_fields() -> Mapping[str, Set[Any]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Patch:
    """
    Sparse override of a mapping.

    Attributes:
        fields (Mapping[str, Set]): Overridden keys only. A value that is itself a
            Patch merges key by key into the base's nested map; any other value
            replaces the base value wholesale.

    Examples:
        >>> p = Patch.from_mapping({"enabled": False})
        >>> p.get("enabled")
        Set(value=False)
        >>> p.get("position")
        UNSET
        >>> p.apply({"enabled": True, "position": "left"})
        {'enabled': False, 'position': 'left'}
    """

    fields: Mapping[str, Set[Any]] = field(default_factory=_empty_fields)

    @classmethod
    def from_mapping(cls, raw: Any, nested: frozenset[str] | tuple[str, ...] = frozenset()) -> Patch:
        """
        Build a patch from a plain override mapping using key presence.

        Args:
            raw (Any): Override mapping; anything else yields an empty patch.
            nested (Iterable[str]): Keys whose mapping values merge one level deeper.

        Returns:
            Patch: Patch with one Set per key present in ``raw``.
        """
        if not isinstance(raw, Mapping):
            return cls()
        entries: dict[str, Set[Any]] = {}
        for key, value in raw.items():
            if key in nested and isinstance(value, Mapping):
                entries[key] = Set(cls.from_mapping(value))
            else:
                entries[key] = Set(value)
        return cls(MappingProxyType(entries))

    def get(self, key: str) -> Set[Any] | Unset:
        """Return ``Set(value)`` for an overridden key, else ``UNSET``."""
        return self.fields.get(key, UNSET)

    def is_empty(self) -> bool:
        return not self.fields

    def apply(self, base: Any) -> JsonDict:
        """
        Merge this patch onto ``base`` and return a new dict.

        Args:
            base (Any): Base mapping; non-mappings are treated as empty.

        Returns:
            JsonDict: Base keys in base order with overridden values substituted,
            followed by keys only the patch names.
        """
        result: JsonDict = dict(base) if isinstance(base, Mapping) else {}
        for key, entry in self.fields.items():
            value = entry.value
            if isinstance(value, Patch):
                result[key] = value.apply(result.get(key))
            else:
                result[key] = value
        return result

    def to_mapping(self) -> JsonDict:
        """Plain-dict form of the patch (inverse of ``from_mapping``)."""
        out: JsonDict = {}
        for key, entry in self.fields.items():
            value = entry.value
            out[key] = value.to_mapping() if isinstance(value, Patch) else value
        return out


@dataclass(frozen=True)
class PageOverrides:
    """
    Typed view of a page's ``overrides`` object.

    Attributes:
        regions (Mapping[str, Patch]): Region name → region patch.
        header_elements (Patch): Patch for ``structure.headerElements``.
        content_layout (Patch): Patch for ``structure.contentLayout``.
        page_header (Patch): Patch for ``structure.pageHeader``.
        grid_layout (Set | Unset): Replacement for ``structure.gridLayout``.
    """

    regions: Mapping[str, Patch] = field(default_factory=lambda: MappingProxyType({}))
    header_elements: Patch = field(default_factory=Patch)
    content_layout: Patch = field(default_factory=Patch)
    page_header: Patch = field(default_factory=Patch)
    grid_layout: Set[Any] | Unset = UNSET

    @classmethod
    def from_mapping(cls, raw: Any) -> PageOverrides:
        """
        Parse a page ``overrides`` object.

        Notes:
            Keys that are neither region names nor one of headerElements,
            contentLayout, pageHeader, gridLayout are ignored here
            (validate_structure reports them).
        """
        if not isinstance(raw, Mapping):
            return cls()
        regions = {
            name: Patch.from_mapping(raw[name], NESTED_MERGE_FIELDS)
            for name in REGION_NAMES
            if name in raw and isinstance(raw[name], Mapping)
        }
        return cls(
            regions=MappingProxyType(regions),
            header_elements=Patch.from_mapping(raw.get(HEADER_ELEMENTS_KEY), HEADER_ELEMENT_NAMES),
            content_layout=Patch.from_mapping(raw.get(CONTENT_LAYOUT_KEY), _CONTENT_LAYOUT_NESTED),
            page_header=Patch.from_mapping(raw.get(PAGE_HEADER_KEY)),
            grid_layout=Set(raw[GRID_LAYOUT_KEY]) if GRID_LAYOUT_KEY in raw else UNSET,
        )

    def is_empty(self) -> bool:
        return (
            all(p.is_empty() for p in self.regions.values())
            and self.header_elements.is_empty()
            and self.content_layout.is_empty()
            and self.page_header.is_empty()
            and isinstance(self.grid_layout, Unset)
        )


def _as_region_patch(override: Any) -> Patch:
    if isinstance(override, Patch):
        return override
    if override is None or isinstance(override, Unset):
        return Patch()
    return Patch.from_mapping(override, NESTED_MERGE_FIELDS)


def effective_region(base: Any, override: Any) -> JsonDict | None:
    """
    Compute the effective region for one named region.

    Args:
        base (Any): Base region record (None when the base has no such region).
        override (Any): Region override as a plain mapping or a Patch; None means
            no override.

    Returns:
        JsonDict | None: Merged region, or None when there is neither a base
        region nor an override (absent regions are never synthesized).

    Examples:
        >>> base = {"behavior": {"fixed": True, "collapsible": False, "scrollable": True}}
        >>> effective_region(base, {"behavior": {"collapsible": True}})["behavior"]
        {'fixed': True, 'collapsible': True, 'scrollable': True}
    """
    patch = _as_region_patch(override)
    if not isinstance(base, Mapping):
        if patch.is_empty():
            return None
        return patch.apply({})
    return patch.apply(base)


def _as_page_overrides(overrides: Any) -> PageOverrides:
    if isinstance(overrides, PageOverrides):
        return overrides
    return PageOverrides.from_mapping(overrides)


def _cascade_section(result: JsonDict, key: str, patch: Patch) -> None:
    if patch.is_empty():
        return
    result[key] = patch.apply(result.get(key))


def effective_document(base: Any, page_overrides: Any) -> JsonDict:
    """
    Compute the effective structural document for one page.

    Args:
        base (Any): Base structural document (``regions``, ``headerElements``, ...).
        page_overrides (Any): The page's ``overrides`` object or a PageOverrides.

    Returns:
        JsonDict: New document. Regions and sections the overrides do not mention
        are equal to the base; ``effective_document(base, {}) == base``.

    Examples:
        >>> base = {"regions": {"footer": {"enabled": False}}}
        >>> effective_document(base, {"footer": {"enabled": True}})["regions"]["footer"]
        {'enabled': True}
        >>> effective_document(base, {}) == base
        True
    """
    result: JsonDict = dict(base) if isinstance(base, Mapping) else {}
    overrides = _as_page_overrides(page_overrides)

    base_regions = result.get("regions")
    if isinstance(base_regions, Mapping):
        regions: JsonDict = {}
        for name, region in base_regions.items():
            merged = effective_region(region, overrides.regions.get(name))
            regions[name] = region if merged is None else merged
        for name, patch in overrides.regions.items():
            if name not in regions and not patch.is_empty():
                regions[name] = patch.apply({})
        result["regions"] = regions
    elif any(not p.is_empty() for p in overrides.regions.values()):
        result["regions"] = {
            name: patch.apply({}) for name, patch in overrides.regions.items() if not patch.is_empty()
        }

    _cascade_section(result, HEADER_ELEMENTS_KEY, overrides.header_elements)
    _cascade_section(result, CONTENT_LAYOUT_KEY, overrides.content_layout)
    _cascade_section(result, PAGE_HEADER_KEY, overrides.page_header)
    if isinstance(overrides.grid_layout, Set):
        result[GRID_LAYOUT_KEY] = overrides.grid_layout.value
    return result


def page_overrides(layout: Any, page_id: PageId | str) -> PageOverrides | None:
    """
    Look up the typed overrides of ``page_id`` in a layout contract.

    Returns:
        PageOverrides | None: None when the layout has no such page.
    """
    if not isinstance(layout, Mapping):
        return None
    structure = layout.get("structure")
    pages = structure.get("pages") if isinstance(structure, Mapping) else None
    page = pages.get(page_id) if isinstance(pages, Mapping) else None
    if not isinstance(page, Mapping):
        return None
    return PageOverrides.from_mapping(page.get("overrides"))


def resolve_page_layout(layout: Any, page_id: PageId | str | None) -> JsonDict:
    """
    Return a layout contract whose structure is effective for ``page_id``.

    Args:
        layout (Any): Layout contract with ``structure.regions`` and ``structure.pages``.
        page_id (str | None): Page to resolve; None or an unknown page yields the
            base layout unchanged.

    Returns:
        JsonDict: New top-level layout dict.
    """
    result: JsonDict = dict(layout) if isinstance(layout, Mapping) else {}
    if page_id is None:
        return result
    overrides = page_overrides(layout, page_id)
    if overrides is None:
        logger.debug("no page %r in layout; using base structure", page_id)
        return result
    result["structure"] = effective_document(result.get("structure"), overrides)
    return result
