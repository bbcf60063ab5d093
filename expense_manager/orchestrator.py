"""
Application Context for Expense Manager

This module ties together all the components for one process run:
credential store, ledger, snapshot storage, audit logger and shell.

DESIGN DECISION: There are no module-level singletons. Everything is
built here once at startup and owned by the shell until the process
exits. Nothing holds an external resource between operations, so no
teardown is needed.
"""

import sys
from typing import Optional, TextIO

from rich.console import Console

from expense_manager.audit import AuditLogger, configure_logging
from expense_manager.config import get_settings, validate_all_settings
from expense_manager.services import (
    CredentialStore,
    ExpenseLedger,
    JsonFileSnapshotStorage,
    SnapshotStorageInterface,
)
from expense_manager.shell import ExpenseShell


def create_app_components(
    console: Optional[Console] = None,
    stdin: Optional[TextIO] = None,
    storage: Optional[SnapshotStorageInterface] = None,
) -> tuple[ExpenseShell, CredentialStore, ExpenseLedger]:
    """
    Factory function to create all application components.

    Args:
        console: Output console. Defaults to a rich Console on stdout.
        stdin: Input stream. None reads from the terminal.
        storage: Snapshot storage. Defaults to JSON files.

    Returns:
        (shell, credential_store, ledger)
    """
    settings = get_settings()

    credentials = CredentialStore()
    ledger = ExpenseLedger()
    storage = storage or JsonFileSnapshotStorage(settings.storage)

    shell = ExpenseShell(
        credentials=credentials,
        ledger=ledger,
        storage=storage,
        audit_logger=AuditLogger(),
        console=console,
        stdin=stdin,
    )

    return shell, credentials, ledger


def main() -> int:
    """
    Console entry point: check settings, configure logging, run the shell.

    Returns a non-zero status only when the configuration is invalid.
    """
    status = validate_all_settings()
    errors = [
        f"{name}: {status[f'{name}_error']}"
        for name in ("logging", "storage", "app")
        if not status.get(name, False)
    ]
    if errors:
        print("Invalid configuration:", file=sys.stderr)
        for error in errors:
            print(f"  {error}", file=sys.stderr)
        return 2

    settings = get_settings()
    configure_logging(settings.logging, debug=settings.app.debug_mode)

    shell, _, _ = create_app_components()
    shell.run()
    return 0
