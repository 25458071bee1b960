# monster_vault/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from monster_vault.core.derivation import DerivationAdapter
from monster_vault.core.engine import MonsterEngine
from monster_vault.core.store import JsonFileBackend, RecordStore
from monster_vault.core.vault import DEFAULT_EXPORT_NAME, Vault
from monster_vault.vault_log import DiagnosticsLog


def _default_base_dir() -> str:
    # Project root can be overridden if needed (e.g. for tests or deployment)
    return os.path.abspath(
        os.getenv("MONSTER_VAULT_BASE_DIR", os.path.join(os.path.dirname(__file__), ".."))
    )


@dataclass(frozen=True)
class VaultConfig:
    """Where the vault and its diagnostics live.

    Values can be overridden via environment variables:
    - MONSTER_VAULT_BASE_DIR
    - MONSTER_VAULT_STORE_PATH
    - MONSTER_VAULT_DIAGNOSTICS_PATH
    - MONSTER_VAULT_EXPORT_NAME
    """

    base_dir: str = field(default_factory=_default_base_dir)
    store_path: str = ""
    diagnostics_path: str = ""
    export_name: str = field(
        default_factory=lambda: os.getenv("MONSTER_VAULT_EXPORT_NAME", DEFAULT_EXPORT_NAME)
    )

    def __post_init__(self) -> None:
        # Paths default relative to base_dir, so resolve them after it is known.
        state_dir = os.path.join(self.base_dir, "vault_state")
        if not self.store_path:
            object.__setattr__(
                self,
                "store_path",
                os.getenv("MONSTER_VAULT_STORE_PATH", os.path.join(state_dir, "monster_vault.json")),
            )
        if not self.diagnostics_path:
            object.__setattr__(
                self,
                "diagnostics_path",
                os.getenv("MONSTER_VAULT_DIAGNOSTICS_PATH", os.path.join(state_dir, "diagnostics.jsonl")),
            )

    def export_filename(self) -> str:
        return f"{self.export_name}.json"


def build_vault(config: VaultConfig | None = None) -> Vault:
    """Wire the JSON-file store, default engine and diagnostics log into a Vault."""
    cfg = config or VaultConfig()
    store = RecordStore(JsonFileBackend(Path(cfg.store_path)))
    adapter = DerivationAdapter(MonsterEngine(), diagnostics=DiagnosticsLog(Path(cfg.diagnostics_path)))
    return Vault(store, adapter)
