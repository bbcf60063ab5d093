"""
Interactive Console Shell

The text-menu front end. Two menus, each a fixed set of numbered
commands:

    Main menu:      Register, Login, Exit
    Logged-in menu: Add, View All, View by Category, View Total,
                    Save, Load, Logout

DESIGN PRINCIPLES:
1. Every command is an explicit enum member; anything else is the
   explicit "unrecognized" case and simply re-prompts the same menu
2. Input mistakes are reported inline and never end the session
3. A failed load leaves the ledger exactly as it was
4. The shell owns no globals: every collaborator is injected
"""

from enum import Enum
from typing import Optional, TextIO

from rich.console import Console

from expense_manager.audit import AuditLogger, create_correlation_id
from expense_manager.models.expense import ExpenseRecord, Session
from expense_manager.services.credentials import CredentialStore
from expense_manager.services.ledger import ExpenseLedger
from expense_manager.services.storage import (
    SnapshotStorageInterface,
    StorageError,
)


INVALID_CHOICE = "Invalid choice. Please try again."
INVALID_AMOUNT = "Invalid amount. Please enter a number."


class MenuCommand(int, Enum):
    """Base for numbered menu commands."""

    @classmethod
    def parse(cls, raw: str) -> Optional["MenuCommand"]:
        """
        Map a typed menu choice to a command.

        Returns None for anything that is not one of the listed numbers.
        """
        try:
            return cls(int(raw.strip()))
        except ValueError:
            return None


class MainCommand(MenuCommand):
    REGISTER = 1
    LOGIN = 2
    EXIT = 3


class LedgerCommand(MenuCommand):
    ADD_EXPENSE = 1
    VIEW_ALL = 2
    VIEW_BY_CATEGORY = 3
    VIEW_TOTAL_BY_CATEGORY = 4
    SAVE = 5
    LOAD = 6
    LOGOUT = 7


MAIN_MENU_LABELS = {
    MainCommand.REGISTER: "Register",
    MainCommand.LOGIN: "Login",
    MainCommand.EXIT: "Exit",
}

LEDGER_MENU_LABELS = {
    LedgerCommand.ADD_EXPENSE: "Add Expense",
    LedgerCommand.VIEW_ALL: "View All Expenses",
    LedgerCommand.VIEW_BY_CATEGORY: "View Expenses by Category",
    LedgerCommand.VIEW_TOTAL_BY_CATEGORY: "View Total by Category",
    LedgerCommand.SAVE: "Save Expenses",
    LedgerCommand.LOAD: "Load Expenses",
    LedgerCommand.LOGOUT: "Logout",
}


class ExpenseShell:
    """
    Menu-driven console front end.

    Reads one line per prompt from `stdin` (the real terminal when
    None) and writes everything through a rich Console.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        ledger: ExpenseLedger,
        storage: SnapshotStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        console: Optional[Console] = None,
        stdin: Optional[TextIO] = None,
    ):
        self._credentials = credentials
        self._ledger = ledger
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._console = console or Console(highlight=False)
        self._stdin = stdin

    # -------------------------------------------------------------------------
    # Console I/O
    # -------------------------------------------------------------------------

    def _say(self, text: str = "") -> None:
        """Print user data verbatim (no markup, emoji or wrapping)."""
        self._console.print(
            text,
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )

    def _ask(self, prompt: str) -> str:
        """
        Prompt for one line of input.

        Raises EOFError when the input stream is exhausted.
        """
        line = self._console.input(
            prompt,
            markup=False,
            emoji=False,
            stream=self._stdin,
        )
        if self._stdin is not None and line == "":
            raise EOFError
        return line.rstrip("\r\n")

    def _show_menu(self, title: str, labels: dict) -> None:
        self._console.print()
        self._console.print(f"[bold]{title}[/bold]")
        for command, label in labels.items():
            self._say(f"{command.value}. {label}")

    def _show_records(self, header: str, records: list[ExpenseRecord]) -> None:
        self._say()
        self._say(header)
        for record in records:
            self._say(record.describe())

    # -------------------------------------------------------------------------
    # Main menu
    # -------------------------------------------------------------------------

    def run(self) -> None:
        """
        Run the main menu until Exit is chosen or input ends.
        """
        try:
            while True:
                self._show_menu("Expense Manager Application", MAIN_MENU_LABELS)
                raw = self._ask("Choose an option: ")
                command = MainCommand.parse(raw)

                if command is MainCommand.REGISTER:
                    self._handle_register()
                elif command is MainCommand.LOGIN:
                    session = self._handle_login()
                    if session is not None:
                        self._manage_expenses(session)
                elif command is MainCommand.EXIT:
                    break
                else:
                    self._audit_logger.log_invalid_input("main_menu", raw)
                    self._say(INVALID_CHOICE)
        except EOFError:
            self._say()

        self._say("Goodbye!")

    def _handle_register(self) -> None:
        username = self._ask("Enter username: ")
        password = self._ask("Enter password: ")

        if self._credentials.register(username, password):
            self._audit_logger.log_user_registered(username)
            self._say("Registration successful!")
        else:
            self._audit_logger.log_registration_rejected(username)
            self._say("Username already exists. Try a different one.")

    def _handle_login(self) -> Optional[Session]:
        """Returns the new session, or None if the credentials are wrong."""
        username = self._ask("Enter username: ")
        password = self._ask("Enter password: ")

        if not self._credentials.authenticate(username, password):
            self._audit_logger.log_login_failed(username)
            self._say("Invalid credentials. Please try again.")
            return None

        session = Session(username=username, correlation_id=create_correlation_id())
        self._audit_logger.log_login_succeeded(username, session.correlation_id)
        self._say("Login successful!")
        return session

    # -------------------------------------------------------------------------
    # Logged-in menu
    # -------------------------------------------------------------------------

    def _manage_expenses(self, session: Session) -> None:
        while True:
            self._show_menu("Expense Management", LEDGER_MENU_LABELS)
            raw = self._ask("Choose an option: ")
            command = LedgerCommand.parse(raw)

            if command is LedgerCommand.ADD_EXPENSE:
                self._handle_add_expense(session)
            elif command is LedgerCommand.VIEW_ALL:
                self._show_records("All Expenses:", self._ledger.all())
            elif command is LedgerCommand.VIEW_BY_CATEGORY:
                self._handle_view_by_category()
            elif command is LedgerCommand.VIEW_TOTAL_BY_CATEGORY:
                self._handle_view_total_by_category()
            elif command is LedgerCommand.SAVE:
                self._handle_save(session)
            elif command is LedgerCommand.LOAD:
                self._handle_load(session)
            elif command is LedgerCommand.LOGOUT:
                self._audit_logger.log_logout(session.username, session.correlation_id)
                return
            else:
                self._audit_logger.log_invalid_input(
                    "expense_menu", raw, session.correlation_id
                )
                self._say(INVALID_CHOICE)

    def _handle_add_expense(self, session: Session) -> None:
        category = self._ask("Enter category: ")
        raw_amount = self._ask("Enter amount: ")

        amount = parse_amount(raw_amount)
        if amount is None:
            self._audit_logger.log_invalid_input(
                "amount", raw_amount, session.correlation_id
            )
            self._say(INVALID_AMOUNT)
            return

        record = self._ledger.add(category, amount)
        self._audit_logger.log_expense_added(
            category=record.category,
            amount=record.amount,
            username=session.username,
            correlation_id=session.correlation_id,
        )
        self._say("Expense added successfully!")

    def _handle_view_by_category(self) -> None:
        category = self._ask("Enter category: ")
        self._show_records(
            f"Expenses in category {category}:",
            self._ledger.filter_by_category(category),
        )

    def _handle_view_total_by_category(self) -> None:
        category = self._ask("Enter category: ")
        total = self._ledger.total_by_category(category)
        self._say(f"Total expenses in category {category}: ${total}")

    def _handle_save(self, session: Session) -> None:
        filename = self._ask("Enter filename to save: ")
        records = self._ledger.all()

        try:
            self._storage.save(records, filename)
        except StorageError as e:
            self._audit_logger.log_persistence_failed(
                "save", filename, str(e), session.correlation_id
            )
            self._say(f"Error saving expenses: {e}")
            return

        self._audit_logger.log_snapshot_saved(
            filename, len(records), session.correlation_id
        )
        self._say(f"Expenses saved to {filename}")

    def _handle_load(self, session: Session) -> None:
        filename = self._ask("Enter filename to load: ")

        try:
            records = self._storage.load(filename)
        except StorageError as e:
            self._audit_logger.log_persistence_failed(
                "load", filename, str(e), session.correlation_id
            )
            self._say(f"Error loading expenses: {e}")
            return

        self._ledger.replace_all(records)
        self._audit_logger.log_snapshot_loaded(
            filename, len(records), session.correlation_id
        )
        self._say(f"Expenses loaded from {filename}")


def parse_amount(raw: str) -> Optional[float]:
    """
    Parse a typed amount.

    Returns None unless the text is a decimal number. Sign and
    magnitude are not checked, and NaN or Infinity are accepted.
    """
    try:
        return float(raw.strip())
    except ValueError:
        return None
