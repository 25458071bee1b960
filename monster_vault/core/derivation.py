from __future__ import annotations

import copy
import logging
from typing import Protocol

from monster_vault.core.contracts import Blueprint, DerivedMonster, DerivedResult, Projection, VaultRecord
from monster_vault.vault_log import DiagnosticsSink

logger = logging.getLogger(__name__)


class DerivationEngine(Protocol):
    def create_projection(self, blueprint: Blueprint) -> DerivedMonster: ...

    def default_blueprint(self) -> Blueprint: ...


class DerivationAdapter:
    """Wrap the derivation engine so every record can always be displayed.

    No caching: each call re-runs the engine, so repeated reads recompute.
    """

    def __init__(self, engine: DerivationEngine, diagnostics: DiagnosticsSink | None = None) -> None:
        self.engine = engine
        self.diagnostics = diagnostics

    def derive(self, blueprint: Blueprint) -> DerivedMonster:
        # The engine gets a copy so it can never mutate stored blueprints.
        return self.engine.create_projection(copy.deepcopy(blueprint))

    def derive_safe(self, blueprint: Blueprint, *, record_id: int | None = None) -> DerivedResult:
        try:
            return DerivedResult(monster=self.derive(blueprint))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Couldn't create monster profile from blueprint (record %s), reverting to default: %s",
                record_id,
                exc,
            )
            self._record_fallback(record_id, exc)
            # The default blueprint must always derive; let a failure here propagate.
            default = self.engine.default_blueprint()
            return DerivedResult(monster=self.derive(default), fallback=True, error=repr(exc))

    def project(self, record: VaultRecord) -> Projection:
        result = self.derive_safe(record.blueprint, record_id=record.id)
        return Projection(
            record_id=record.id,
            monster=result.monster,
            fallback=result.fallback,
            error=result.error,
        )

    def _record_fallback(self, record_id: int | None, exc: Exception) -> None:
        if self.diagnostics is None:
            return
        try:
            self.diagnostics.record(
                {
                    "type": "derivation_fallback",
                    "record_id": record_id,
                    "error": exc,
                }
            )
        except Exception:  # noqa: BLE001
            # A broken diagnostics sink must not break the listing.
            logger.exception("Could not record derivation diagnostic for record %s", record_id)
