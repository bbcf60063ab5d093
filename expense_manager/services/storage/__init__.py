"""
Storage Services Package

Provides the abstract snapshot interface and the JSON file implementation.
"""

from expense_manager.services.storage.interface import (
    SnapshotFormatError,
    SnapshotIOError,
    SnapshotStorageInterface,
    StorageError,
)
from expense_manager.services.storage.json_file import JsonFileSnapshotStorage

__all__ = [
    # Interface
    "SnapshotStorageInterface",
    # Exceptions
    "SnapshotFormatError",
    "SnapshotIOError",
    "StorageError",
    # JSON file implementation
    "JsonFileSnapshotStorage",
]
