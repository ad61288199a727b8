"""
orqui.io — Persistence layer for Orqui contracts and editor drafts.

## Responsibilities
- Load runtime settings (contracts/drafts directories, export versions, hash verification).
- Persist editable drafts through a key-value store (in-memory or JSON files).
- Save and load contract envelopes, one file per schema, with atomic writes.
- Present token tables as Polars DataFrames for inspection.

## Public API
- OrquiSettings — configuration with env > TOML > defaults precedence.
- MemoryStore, FileStore — `get(key)` / `set(key, value)` draft stores.
- ContractRepository, SaveResult — `load_contracts()` / `save_contract(envelope)`.
- token_frame — token table → DataFrame.

## Import DAG discipline
- Depends only on stdlib, polars, and orqui.core.*.
- MUST NOT import orqui.cli.

## Examples
```python
from orqui.core import wrap
from orqui.io import ContractRepository, OrquiSettings

repo = ContractRepository(OrquiSettings(contracts_dir="out/contracts"))  # doctest: +SKIP
repo.save_contract(wrap({"tokens": {}}, "layout-contract", "2.0.0"))  # doctest: +SKIP
repo.load_contracts()["layout-contract"]["hash"]  # doctest: +SKIP
```

## Notes
- IO write path: tmp file → fsync → os.replace(tmp, final) on the same filesystem.
- save_contract never raises for expected failures; it returns SaveResult(ok=False, error=...).
"""

from __future__ import annotations

from .catalog import token_frame
from .config import OrquiSettings
from .errors import IoConfigError, IoError, IoReadError, IoWriteError
from .store import ContractRepository, FileStore, KeyValueStore, MemoryStore, SaveResult

__all__ = [
    "OrquiSettings",
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "ContractRepository",
    "SaveResult",
    "token_frame",
    "IoError",
    "IoConfigError",
    "IoReadError",
    "IoWriteError",
]
