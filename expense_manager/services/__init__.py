"""Services package."""

from expense_manager.services.credentials import CredentialStore
from expense_manager.services.ledger import ExpenseLedger
from expense_manager.services.storage import (
    JsonFileSnapshotStorage,
    SnapshotFormatError,
    SnapshotIOError,
    SnapshotStorageInterface,
    StorageError,
)

__all__ = [
    "CredentialStore",
    "ExpenseLedger",
    # Storage services
    "JsonFileSnapshotStorage",
    "SnapshotFormatError",
    "SnapshotIOError",
    "SnapshotStorageInterface",
    "StorageError",
]
