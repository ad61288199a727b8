"""
Component registry normalization.

Ensures every component definition carries a `name` equal to its own key in the
registry mapping, so resolvers can treat `component["name"]` as a lookup key.
Run it before any other core operation touches a registry.

Notes
- Pure and idempotent: normalize(normalize(r)) == normalize(r).
- Total: non-mapping registries or components mappings are returned as shallow
  copies untouched; mismatches are corrected, never rejected.
- Only mismatching entries are copied (shallow); other entries are shared with
  the input, which is never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .typing import JsonDict

__all__ = [
    "normalize",
    "component_names",
]

logger = logging.getLogger(__name__)


def normalize(registry: Any) -> Any:
    """
    Force ``components[key]["name"] == key`` for every registry entry.

    Args:
        registry (Any): UI registry document ``{"components": {name: definition}}``.

    Returns:
        Any: New registry dict with corrected entries; non-mapping input is
        returned unchanged.

    Examples:
        >>> normalize({"components": {"Button": {"name": "Btn"}}})["components"]["Button"]["name"]
        'Button'
    """
    if not isinstance(registry, Mapping):
        return registry
    out: JsonDict = dict(registry)
    components = registry.get("components")
    if not isinstance(components, Mapping):
        return out
    fixed: JsonDict = {}
    for key, definition in components.items():
        if isinstance(definition, Mapping) and definition.get("name") != key:
            logger.debug("registry: renaming component %r (name=%r)", key, definition.get("name"))
            definition = {**definition, "name": key}
        fixed[key] = definition
    out["components"] = fixed
    return out


def component_names(registry: Any) -> list[str]:
    """Return the registry's component keys in document order."""
    if not isinstance(registry, Mapping):
        return []
    components = registry.get("components")
    return list(components) if isinstance(components, Mapping) else []
