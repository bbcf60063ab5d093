"""
Audit Models for Expense Manager

Every significant action in the shell is recorded as an audit event.
This provides:
1. Traceability of what a user did during a session
2. Debugging information when a save or load fails

DESIGN DECISION: Passwords never appear in audit events.
Only usernames are recorded for authentication events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


# Longest user-supplied value interpolated into a description
MAX_VALUE_LENGTH = 100


def _clip(value: str) -> str:
    if len(value) <= MAX_VALUE_LENGTH:
        return value
    return value[:MAX_VALUE_LENGTH] + "..."


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Authentication
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"

    # Ledger
    EXPENSE_ADDED = "expense_added"

    # Persistence
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_LOADED = "snapshot_loaded"
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"

    # Shell
    INVALID_INPUT = "invalid_input"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who triggered it
    username: Optional[str] = Field(
        default=None,
        description="User the event relates to, if any"
    )

    # Correlation - all events within one login session share an ID
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events from one session"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "username": self.username,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered("alice")
        event = AuditEventBuilder.snapshot_saved("expenses.json", 3, correlation_id)
    """

    @staticmethod
    def user_registered(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            username=username,
            description=f"User registered: {_clip(username)}",
        )

    @staticmethod
    def registration_rejected(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            username=username,
            description=f"Registration rejected, username taken: {_clip(username)}",
        )

    @staticmethod
    def login_succeeded(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            username=username,
            correlation_id=correlation_id,
            description=f"User logged in: {_clip(username)}",
        )

    @staticmethod
    def login_failed(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            username=username,
            description=f"Login failed for: {_clip(username)}",
        )

    @staticmethod
    def logout(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            username=username,
            correlation_id=correlation_id,
            description=f"User logged out: {_clip(username)}",
        )

    @staticmethod
    def expense_added(
        category: str,
        amount: float,
        username: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            username=username,
            correlation_id=correlation_id,
            description=f"Expense added: {_clip(category)} - ${amount}",
            details={
                "category": category,
                "amount": amount,
            },
        )

    @staticmethod
    def snapshot_saved(
        filename: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            correlation_id=correlation_id,
            description=f"Saved {record_count} expenses to {_clip(str(filename))}",
            details={
                "filename": filename,
                "record_count": record_count,
            },
        )

    @staticmethod
    def snapshot_loaded(
        filename: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            correlation_id=correlation_id,
            description=f"Loaded {record_count} expenses from {_clip(str(filename))}",
            details={
                "filename": filename,
                "record_count": record_count,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        filename: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.SAVE_FAILED
            if operation == "save"
            else AuditEventType.LOAD_FAILED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"{operation.capitalize()} failed for {_clip(str(filename))}",
            error_message=error_message,
            details={
                "operation": operation,
                "filename": filename,
            },
        )

    @staticmethod
    def invalid_input(
        menu: str,
        raw_value: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_INPUT,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Unrecognized input at {menu}",
            details={
                "menu": menu,
                "value": raw_value[:MAX_VALUE_LENGTH],
            },
        )
