from __future__ import annotations

from pathlib import Path

import pytest

from orqui.core.grammar import ContractSchema
from orqui.io.config import OrquiSettings
from orqui.io.errors import IoConfigError

_ENV_KEYS = [
    "ORQUI_CONTRACTS_DIR",
    "ORQUI_DRAFTS_DIR",
    "ORQUI_LAYOUT_VERSION",
    "ORQUI_REGISTRY_VERSION",
    "ORQUI_VERIFY_HASH_ON_IMPORT",
    "ORQUI_INDENT",
    "ORQUI_LOG_LEVEL",
]


def _write_orqui_toml(tmp: Path, content: str) -> Path:
    p = tmp / "orqui.toml"
    p.write_text(content)
    return p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_orqui_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    _write_orqui_toml(
        tmp_path,
        """
        [orqui]
        contracts_dir = "contracts_toml"
        indent = 4
        verify_hash_on_import = false
        """.strip(),
    )
    # Ensure cwd for OrquiSettings.from_toml() search
    monkeypatch.chdir(tmp_path)
    # Arrange ENV that should override TOML
    monkeypatch.setenv("ORQUI_CONTRACTS_DIR", "contracts_env")
    monkeypatch.setenv("ORQUI_INDENT", "0")
    monkeypatch.setenv("ORQUI_VERIFY_HASH_ON_IMPORT", "yes")

    # Act
    s = OrquiSettings.load()

    # Assert precedence: env > TOML
    assert s.contracts_dir == "contracts_env"
    assert s.indent == 0
    assert s.verify_hash_on_import is True


def test_orqui_settings_from_toml_when_no_env(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML only (direct keys, no table)
    _write_orqui_toml(
        tmp_path,
        """
        drafts_dir = "drafts_toml"
        layout_version = "2.0.1"
        log_level = "debug"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    # Act
    s = OrquiSettings.load()

    # Assert TOML applied
    assert s.drafts_dir == "drafts_toml"
    assert s.layout_version == "2.0.1"
    assert s.log_level == "DEBUG"
    assert s.contracts_dir == "contracts"  # default kept


def test_orqui_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [project]
        name = "demo"

        [tool.orqui]
        registry_version = "1.1.0"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)

    s = OrquiSettings.load()

    assert s.registry_version == "1.1.0"
    assert s.version_for(ContractSchema.UI_REGISTRY_CONTRACT) == "1.1.0"
    assert s.version_for(ContractSchema.LAYOUT_CONTRACT) == s.layout_version


def test_orqui_settings_defaults_without_files(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert OrquiSettings.load() == OrquiSettings()


def test_orqui_settings_ignores_invalid_values(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ORQUI_LAYOUT_VERSION", "latest")
    monkeypatch.setenv("ORQUI_INDENT", "-2")
    monkeypatch.setenv("ORQUI_LOG_LEVEL", "loud")

    s = OrquiSettings.load()

    assert s.layout_version == "2.0.0"
    assert s.indent == 2
    assert s.log_level == "WARNING"


def test_orqui_settings_explicit_path(tmp_path: Path) -> None:
    cfg = tmp_path / "custom.toml"
    cfg.write_text('[orqui]\ncontracts_dir = "elsewhere"\n')
    assert OrquiSettings.from_toml(cfg).contracts_dir == "elsewhere"

    with pytest.raises(IoConfigError):
        OrquiSettings.from_toml(tmp_path / "missing.toml")

    bad = tmp_path / "bad.toml"
    bad.write_text("not = [valid")
    with pytest.raises(IoConfigError):
        OrquiSettings.from_toml(bad)
