"""Shared fixtures for the Expense Manager test suite."""

import io
import logging
from datetime import date

import pytest
import structlog
from rich.console import Console

from expense_manager.audit import configure_logging
from expense_manager.config import LoggingSettings, StorageSettings
from expense_manager.services import (
    CredentialStore,
    ExpenseLedger,
    JsonFileSnapshotStorage,
)
from expense_manager.shell import ExpenseShell


@pytest.fixture(autouse=True)
def stderr_logging():
    """Route structlog through stdlib logging on stderr, as main() does."""
    configure_logging(LoggingSettings(level="WARNING", json_format=False, file=None))
    yield
    package_logger = logging.getLogger("expense_manager")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def credentials():
    return CredentialStore()


@pytest.fixture
def ledger():
    return ExpenseLedger()


@pytest.fixture
def storage():
    """JSON storage without fsync to keep tests fast."""
    return JsonFileSnapshotStorage(StorageSettings(encoding="utf-8", fsync=False))


@pytest.fixture
def sample_ledger():
    """Ledger with mixed categories, dates and letter case."""
    ledger = ExpenseLedger()
    ledger.add("Food", 12.50, date(2024, 3, 2))
    ledger.add("Travel", 40.0, date(2024, 3, 1))
    ledger.add("food", 7.25, date(2024, 3, 2))
    ledger.add("Rent", 900.0, date(2024, 2, 28))
    ledger.add("FOOD", 3.0, date(2024, 3, 1))
    return ledger


@pytest.fixture
def run_shell(credentials, ledger, storage):
    """
    Run a shell over scripted input and return everything it printed.

    Usage:
        output = run_shell("1", "alice", "pw1", "3")
    """
    def _run(*lines: str) -> str:
        out = io.StringIO()
        console = Console(file=out, width=200, color_system=None, highlight=False)
        stdin = io.StringIO("".join(f"{line}\n" for line in lines))
        shell = ExpenseShell(
            credentials=credentials,
            ledger=ledger,
            storage=storage,
            console=console,
            stdin=stdin,
        )
        shell.run()
        return out.getvalue()

    return _run
