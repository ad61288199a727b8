"""
Configuration for the orqui.io module and the command line.

Defines OrquiSettings, a frozen dataclass carrying runtime configuration for where
contracts and drafts are stored, which versions new exports are stamped with, and
whether imports verify envelope hashes.

Source of truth
- orqui.core.versioning.CURRENT_VERSIONS provides the default export versions.
- orqui.core.grammar.ContractSchema names the stored contract files.

Import DAG discipline
- Depends only on stdlib and orqui.core.
- Does not import orqui.cli.

Notes
- Precedence: env (ORQUI_*) > TOML (./orqui.toml, else ./pyproject.toml [tool.orqui]) > defaults.
- Values that fail to parse are ignored and the lower-precedence value is kept.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from orqui.core.grammar import ContractSchema
from orqui.core.versioning import SchemaVersion, current_version

from .errors import IoConfigError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class OrquiSettings:
    """
    Runtime settings for contract storage and export.

    Attributes:
        contracts_dir (str): Directory holding "<schema>.json" contract envelopes.
        drafts_dir (str): Directory used by the file-backed autosave store.
        layout_version (str): Version stamped on exported layout contracts.
        registry_version (str): Version stamped on exported UI registry contracts.
        verify_hash_on_import (bool): Recompute and compare envelope hashes on import.
        indent (int): JSON indentation for written contract files.
        log_level (str): Logging level name used by the command line.

    Examples:
        >>> from orqui.io import OrquiSettings
        >>> OrquiSettings(contracts_dir="contracts").layout_version
        '2.0.0'
    """

    contracts_dir: str = "contracts"
    drafts_dir: str = ".orqui/drafts"
    layout_version: str = str(current_version(ContractSchema.LAYOUT_CONTRACT))
    registry_version: str = str(current_version(ContractSchema.UI_REGISTRY_CONTRACT))
    verify_hash_on_import: bool = False
    indent: int = 2
    log_level: str = "WARNING"

    def version_for(self, schema: ContractSchema) -> str:
        """Export version configured for ``schema``."""
        if schema is ContractSchema.UI_REGISTRY_CONTRACT:
            return self.registry_version
        return self.layout_version

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: OrquiSettings, cfg: dict[str, Any] | None) -> OrquiSettings:
        """Apply a loose config mapping onto OrquiSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        for name in ("contracts_dir", "drafts_dir"):
            if name in cfg and isinstance(cfg[name], str) and cfg[name]:
                s = replace(s, **{name: cfg[name]})

        for name in ("layout_version", "registry_version"):
            if name in cfg:
                try:
                    s = replace(s, **{name: str(SchemaVersion.parse(str(cfg[name])))})
                except ValueError:
                    logger.debug("ignoring invalid %s=%r", name, cfg[name])

        if "verify_hash_on_import" in cfg:
            s = replace(s, verify_hash_on_import=_bool(cfg["verify_hash_on_import"]))

        if "indent" in cfg:
            try:
                indent = int(cfg["indent"])
            except (TypeError, ValueError):
                indent = s.indent
            if indent >= 0:
                s = replace(s, indent=indent)

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)

        return s

    @classmethod
    def from_env(cls, base: OrquiSettings | None = None, prefix: str = "ORQUI_") -> OrquiSettings:
        """
        Build OrquiSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - ORQUI_CONTRACTS_DIR
            - ORQUI_DRAFTS_DIR
            - ORQUI_LAYOUT_VERSION
            - ORQUI_REGISTRY_VERSION
            - ORQUI_VERIFY_HASH_ON_IMPORT (1/0/true/false/yes/no/on/off)
            - ORQUI_INDENT
            - ORQUI_LOG_LEVEL
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in (
            "contracts_dir",
            "drafts_dir",
            "layout_version",
            "registry_version",
            "verify_hash_on_import",
            "indent",
            "log_level",
        ):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> OrquiSettings:
        """
        Build OrquiSettings from a TOML file.

        Search order when `path` is None:
            1) ./orqui.toml (with either a top-level [orqui] table or direct keys)
            2) ./pyproject.toml under [tool.orqui]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If an explicitly given ``path`` cannot be read or parsed.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                if path is not None:
                    raise IoConfigError(f"cannot read settings from {str(p)!r}: {exc}") from exc
                logger.debug("skipping unreadable config %s: %s", p, exc)
                return None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "orqui.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if path is None and not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("orqui") if isinstance(tool, dict) else None
            elif isinstance(data.get("orqui"), dict):
                cfg = data["orqui"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> OrquiSettings:
        """
        Load OrquiSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (orqui.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
