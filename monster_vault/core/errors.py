from __future__ import annotations


class VaultError(Exception):
    """Base class for every failure raised by the vault layer."""


class DerivationError(VaultError):
    """A blueprint cannot be turned into a full monster.

    Recovered by the derivation adapter; callers of the read path never see it.
    """


class PersistenceError(VaultError):
    """The storage backend failed a read or a write."""


class UnrecognizedFormatError(VaultError, ValueError):
    """An import payload is neither a vault export nor a single monster."""


class RecordNotFoundError(VaultError, KeyError):
    def __init__(self, record_id: int) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Monster not found: {self.record_id}"
