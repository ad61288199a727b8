"""
Persistence collaborators: a key-value draft store and a contract repository.

Layout (file protocol baseline)
- <drafts_dir>/<key>.json   autosaved editable documents (no envelope)
- <contracts_dir>/<schema>.json   exported contract envelopes, one per schema

Responsibilities
- KeyValueStore: the `get(key) -> value | None` / `set(key, value)` interface the
  editor shell autosaves drafts through; MemoryStore and FileStore implement it.
- ContractRepository: `load_contracts() -> {schema: envelope} | None` and
  `save_contract(envelope) -> SaveResult`, the file-backed stand-in for the
  remote save/load API.

Notes
- The core never calls these; callers hand envelopes from orqui.core.envelope.wrap in
  and feed loaded envelopes to orqui.core.envelope.unwrap.
- save_contract reports failures as SaveResult(ok=False, error=...) rather than raising.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

from orqui.core.errors import SchemaMismatch
from orqui.core.grammar import ContractSchema, schema_from_value
from orqui.core.serde import json_dumps_pretty

from .config import OrquiSettings
from .errors import IoReadError, IoWriteError
from .fs import exists, write_text_atomic

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "SaveResult",
    "ContractRepository",
]

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Draft persistence collaborator used for autosave."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """
    In-process KeyValueStore.

    Notes:
        Values are deep-copied on the way in and out so callers cannot alias
        stored state.
    """

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


def _read_json(path: str) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise IoReadError(f"failed to read {path!r}: {exc}") from exc


class FileStore:
    """
    KeyValueStore persisting each key as a JSON file under ``root``.

    Args:
        root (str): Directory for "<key>.json" files (created on first write).
        indent (int): JSON indentation.
    """

    def __init__(self, root: str, indent: int = 2) -> None:
        self.root = root
        self.indent = indent

    def path_for(self, key: str) -> str:
        """File path backing ``key`` (the key is percent-encoded)."""
        return os.path.join(self.root, f"{quote(key, safe='')}.json")

    def get(self, key: str) -> Any | None:
        """
        Return the stored value for ``key`` or None if nothing is stored.

        Raises:
            IoReadError: If the backing file exists but is unreadable or not JSON.
        """
        path = self.path_for(key)
        if not exists(path):
            return None
        return _read_json(path)

    def set(self, key: str, value: Any) -> None:
        """
        Store ``value`` under ``key`` atomically.

        Raises:
            IoWriteError: If the atomic write fails.
        """
        write_text_atomic(self.path_for(key), json_dumps_pretty(value, indent=self.indent))


@dataclass(frozen=True)
class SaveResult:
    """
    Outcome of ContractRepository.save_contract.

    Attributes:
        ok (bool): True when the envelope was persisted.
        error (str | None): Failure reason when ok is False.
        path (str | None): Written file when ok is True.
    """

    ok: bool
    error: str | None = None
    path: str | None = None


class ContractRepository:
    """
    File-backed contract save/load collaborator.

    Args:
        settings (OrquiSettings): Supplies ``contracts_dir`` and ``indent``.
    """

    def __init__(self, settings: OrquiSettings) -> None:
        self.settings = settings

    def path_for(self, schema: ContractSchema) -> str:
        return os.path.join(self.settings.contracts_dir, f"{schema.value}.json")

    def load_contracts(self) -> dict[str, Any] | None:
        """
        Load every stored contract envelope.

        Returns:
            dict[str, Any] | None: Schema name → envelope, or None when no contract
            file exists.

        Raises:
            IoReadError: If a contract file exists but cannot be read.
        """
        found: dict[str, Any] = {}
        for schema in ContractSchema:
            path = self.path_for(schema)
            if exists(path):
                found[schema.value] = _read_json(path)
        return found or None

    def save_contract(self, envelope: Mapping[str, Any]) -> SaveResult:
        """
        Persist an envelope as "<contracts_dir>/<schema>.json".

        Returns:
            SaveResult: ok=False with a reason when the schema tag is missing/unknown
            or the write fails.
        """
        try:
            schema = schema_from_value(envelope.get("schema"))
        except SchemaMismatch as exc:
            return SaveResult(ok=False, error=str(exc))
        path = self.path_for(schema)
        try:
            write_text_atomic(path, json_dumps_pretty(dict(envelope), indent=self.settings.indent))
        except IoWriteError as exc:
            logger.error("save failed for %s: %s", schema.value, exc)
            return SaveResult(ok=False, error=str(exc))
        logger.info("saved %s contract to %s", schema.value, path)
        return SaveResult(ok=True, path=path)
