"""
Core Data Models for Expense Manager

These models define the schemas for all data flowing through the system.
They are designed to:
1. Be immutable once created (records are only ever replaced wholesale)
2. Compare field-by-field, so a loaded snapshot equals what was saved
3. Be serializable for snapshot files and logging

DESIGN DECISION: Amount and category are deliberately NOT validated.
Negative, zero and empty values are accepted exactly as entered.
"""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


SNAPSHOT_FORMAT_VERSION = 1


# =============================================================================
# USERS
# =============================================================================

class UserAccount(BaseModel):
    """
    A registered user.
    
    KNOWN WEAKNESS: The password is held and compared in plaintext.
    There is no hashing; treat the credential store as a toy gate,
    not as a security boundary.
    """
    model_config = ConfigDict(frozen=True)
    
    username: str = Field(
        ...,
        description="Unique username"
    )
    password: str = Field(
        ...,
        repr=False,
        description="Plaintext password"
    )


class Session(BaseModel):
    """
    The currently logged-in user.
    
    Exists only between a successful login and the matching logout.
    Never persisted.
    """
    model_config = ConfigDict(frozen=True)
    
    username: str
    correlation_id: UUID = Field(
        ...,
        description="Ties together the audit events of this session"
    )
    started_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="When the login succeeded (UTC)"
    )


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseRecord(BaseModel):
    """One recorded expense."""
    # NaN and infinities are written as JSON constants so they load back
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")
    
    category: str = Field(
        ...,
        description="Free-text category, compared case-insensitively"
    )
    amount: float = Field(
        ...,
        description="Amount spent"
    )
    date: dt.date = Field(
        default_factory=dt.date.today,
        description="Calendar date of the expense"
    )
    
    def matches_category(self, category: str) -> bool:
        """Case-insensitive category comparison."""
        return self.category.casefold() == category.casefold()
    
    def describe(self) -> str:
        """Render the record as a single display line."""
        return (
            f"Category: {self.category}, "
            f"Amount: ${self.amount}, "
            f"Date: {self.date.isoformat()}"
        )


class ExpenseSnapshot(BaseModel):
    """
    The full contents of the ledger as written to a snapshot file.
    
    One file holds exactly one snapshot. Saving always writes
    every record; there are no partial or incremental snapshots.
    """
    model_config = ConfigDict(ser_json_inf_nan="constants")
    
    format_version: int = Field(
        default=SNAPSHOT_FORMAT_VERSION,
        description="Snapshot encoding version"
    )
    saved_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="When the snapshot was written (UTC)"
    )
    expenses: list[ExpenseRecord] = Field(
        default_factory=list,
        description="Expense records in ledger order"
    )
