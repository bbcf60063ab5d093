"""
JSON File Snapshot Storage

DESIGN DECISION: A snapshot is one JSON document holding the whole
ledger, encoded and decoded by the pydantic ExpenseSnapshot model.
This keeps the file human-readable and gives a typed, validated
round trip for category, amount and date.

Writes are atomic: the snapshot goes to a temporary file next to
the target, is flushed and fsynced, then os.replace()d over the
target. A failed save leaves any previous file untouched.
"""

import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from expense_manager.config import StorageSettings, get_settings
from expense_manager.models.expense import (
    SNAPSHOT_FORMAT_VERSION,
    ExpenseRecord,
    ExpenseSnapshot,
)
from expense_manager.services.storage.interface import (
    PathLike,
    SnapshotFormatError,
    SnapshotIOError,
    SnapshotStorageInterface,
)


logger = structlog.get_logger(__name__)

TEMP_SUFFIX = ".tmp"


def _snapshot_mode(target: Path) -> int:
    """Permissions for a saved snapshot: keep the old file's, else honour the umask."""
    try:
        return stat.S_IMODE(os.stat(target).st_mode)
    except OSError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Snapshot storage backed by a single JSON file per snapshot.

    File handles never outlive a save() or load() call.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    def _encode(self, records: Sequence[ExpenseRecord]) -> str:
        snapshot = ExpenseSnapshot(expenses=list(records))
        return snapshot.model_dump_json(indent=2)

    def _decode(self, text: str) -> list[ExpenseRecord]:
        try:
            snapshot = ExpenseSnapshot.model_validate_json(text)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "document"
            raise SnapshotFormatError(
                f"Not a valid expense snapshot ({location}: {first['msg']})"
            ) from e

        if snapshot.format_version != SNAPSHOT_FORMAT_VERSION:
            raise SnapshotFormatError(
                f"Unsupported snapshot format version {snapshot.format_version} "
                f"(expected {SNAPSHOT_FORMAT_VERSION})"
            )
        return snapshot.expenses

    def save(self, records: Sequence[ExpenseRecord], filename: PathLike) -> None:
        """Atomically write all records to filename."""
        target = Path(filename)
        content = self._encode(records)
        directory = os.path.dirname(os.path.abspath(target))

        temp_name: Optional[str] = None
        try:
            # Same directory as the target so os.replace stays on one filesystem
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=self._settings.encoding,
                prefix=f"{target.name}-",
                suffix=TEMP_SUFFIX,
                dir=directory,
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(content)
                tf.flush()
                if self._settings.fsync:
                    os.fsync(tf.fileno())

            # NamedTemporaryFile creates 0600 files
            os.chmod(temp_name, _snapshot_mode(target))
            os.replace(temp_name, target)
        except (OSError, ValueError) as e:
            if temp_name and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", path=temp_name)
            logger.error("snapshot_save_failed", filename=str(target), error=str(e))
            raise SnapshotIOError(str(e)) from e

        logger.debug("snapshot_saved", filename=str(target), record_count=len(records))

    def load(self, filename: PathLike) -> list[ExpenseRecord]:
        """Read and validate the snapshot in filename."""
        source = Path(filename)
        try:
            with open(source, encoding=self._settings.encoding) as f:
                text = f.read()
        except UnicodeDecodeError as e:
            logger.error("snapshot_decode_failed", filename=str(source), error=str(e))
            raise SnapshotFormatError(
                f"Snapshot is not {self._settings.encoding} text: {e.reason}"
            ) from e
        except (OSError, ValueError) as e:
            logger.error("snapshot_load_failed", filename=str(source), error=str(e))
            raise SnapshotIOError(str(e)) from e

        records = self._decode(text)
        logger.debug("snapshot_loaded", filename=str(source), record_count=len(records))
        return records
