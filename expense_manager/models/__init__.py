"""
Data Models Package

This package contains all Pydantic models used in Expense Manager.
All data flowing through the system must conform to these schemas.
"""

from expense_manager.models.expense import (
    SNAPSHOT_FORMAT_VERSION,
    ExpenseRecord,
    ExpenseSnapshot,
    Session,
    UserAccount,
)
from expense_manager.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Domain models
    "SNAPSHOT_FORMAT_VERSION",
    "ExpenseRecord",
    "ExpenseSnapshot",
    "Session",
    "UserAccount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
