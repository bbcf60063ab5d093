"""
Abstract Snapshot Storage Interface

DESIGN DECISION: We define an abstract interface for persistence.
This allows us to:
1. Swap the JSON file format for another encoding later
2. Use in-memory storage for testing
3. Keep the shell decoupled from how snapshots are written

The interface is intentionally tiny: persistence is whole-ledger only.
save() writes every record, load() returns every record. There are no
partial or incremental updates.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Union

from expense_manager.models.expense import ExpenseRecord


PathLike = Union[str, "os.PathLike[str]"]


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    Any storage implementation must guarantee that load() of a
    file written by save() returns records equal to, and in the
    same order as, the records that were saved.
    """

    @abstractmethod
    def save(self, records: Sequence[ExpenseRecord], filename: PathLike) -> None:
        """
        Write all records to filename, replacing any existing file.

        Args:
            records: The full ledger contents, in order
            filename: Destination path

        Raises:
            SnapshotIOError: If the file cannot be written
        """
        pass

    @abstractmethod
    def load(self, filename: PathLike) -> list[ExpenseRecord]:
        """
        Read a snapshot previously written by save().

        Args:
            filename: Source path

        Returns:
            The saved records, in saved order

        Raises:
            SnapshotIOError: If the file is missing or unreadable
            SnapshotFormatError: If the content is not a valid snapshot
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class SnapshotIOError(StorageError):
    """Snapshot file could not be read or written."""
    pass


class SnapshotFormatError(StorageError):
    """Snapshot file content does not match the expected encoding."""
    pass
