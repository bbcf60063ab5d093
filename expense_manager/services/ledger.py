"""
Expense Ledger

The in-memory, ordered collection of expense records for a run.

DESIGN DECISION: The internal list is the single source of truth.
Sorted and filtered views are always new lists; nothing but add()
and replace_all() changes the ledger's contents or order.
"""

import datetime as dt
from collections.abc import Iterable, Iterator
from typing import Optional

from expense_manager.models.expense import ExpenseRecord


class ExpenseLedger:
    """Ordered sequence of ExpenseRecord, in insertion order."""

    def __init__(self, records: Optional[Iterable[ExpenseRecord]] = None):
        self._records: list[ExpenseRecord] = list(records or [])

    def add(
        self,
        category: str,
        amount: float,
        date: Optional[dt.date] = None,
    ) -> ExpenseRecord:
        """
        Append a new expense and return it.

        No validation: empty categories and negative or zero
        amounts are recorded as given. date defaults to today.
        """
        if date is None:
            record = ExpenseRecord(category=category, amount=amount)
        else:
            record = ExpenseRecord(category=category, amount=amount, date=date)
        self._records.append(record)
        return record

    def all(self) -> list[ExpenseRecord]:
        """Every record, in insertion order."""
        return list(self._records)

    def sorted_by_date(self) -> list[ExpenseRecord]:
        """
        Records ordered by ascending date.

        sorted() is stable, so records sharing a date keep
        their insertion order.
        """
        return sorted(self._records, key=lambda record: record.date)

    def filter_by_category(self, category: str) -> list[ExpenseRecord]:
        """Records whose category matches, ignoring case."""
        return [
            record for record in self._records
            if record.matches_category(category)
        ]

    def total_by_category(self, category: str) -> float:
        """Sum of amounts for a category (ignoring case); 0.0 if none match."""
        return sum(
            (record.amount for record in self.filter_by_category(category)),
            0.0,
        )

    def replace_all(self, records: Iterable[ExpenseRecord]) -> None:
        """Discard every record and take the given ones, in order."""
        self._records = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(list(self._records))
