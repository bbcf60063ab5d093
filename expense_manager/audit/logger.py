"""
Audit Logger

DESIGN DECISION: Every significant action in the shell is logged.
This provides:
1. Traceability of a session (register, login, adds, saves, loads)
2. Debugging capability when persistence fails

The audit logger:
- Writes through structlog into stdlib logging, never to stdout,
  so the menu output stays clean
- Gracefully handles failures (doesn't crash the shell if logging fails)
- Supports correlation IDs to trace events from one login session
"""

import logging
import sys
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog

from expense_manager.config import LoggingSettings, get_settings
from expense_manager.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditSeverity,
)


LOGGER_NAME = "expense_manager"


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    debug: bool = False,
) -> None:
    """
    Configure structlog and the package's stdlib logger.

    Logs go to stderr, or to the configured file. Call once at startup.
    """
    settings = settings or get_settings().logging
    level = "DEBUG" if debug else settings.level

    if settings.file:
        handler: logging.Handler = logging.FileHandler(settings.file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)

    if settings.json_format:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


class AuditLogger:
    """
    Central audit logging service.

    Every event is emitted as one structured "audit_event" log line
    at the level matching its severity.
    """

    def __init__(self, logger_name: str = f"{LOGGER_NAME}.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was handed to the logger.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never take the shell down
            print(f"audit logging failed: {e}", file=sys.stderr)
            return False

        return True

    def _build_and_log(self, build: Callable[..., AuditEvent], **kwargs: Any) -> bool:
        """Build an event and log it; a bad event is reported, never raised."""
        try:
            event = build(**kwargs)
        except Exception as e:
            print(f"audit event could not be built: {e}", file=sys.stderr)
            return False
        return self.log(event)

    def log_user_registered(self, username: str) -> None:
        """Log a successful registration."""
        self._build_and_log(AuditEventBuilder.user_registered, username=username)

    def log_registration_rejected(self, username: str) -> None:
        """Log a registration refused because the username exists."""
        self._build_and_log(AuditEventBuilder.registration_rejected, username=username)

    def log_login_succeeded(self, username: str, correlation_id: UUID) -> None:
        self._build_and_log(
            AuditEventBuilder.login_succeeded,
            username=username,
            correlation_id=correlation_id,
        )

    def log_login_failed(self, username: str) -> None:
        self._build_and_log(AuditEventBuilder.login_failed, username=username)

    def log_logout(self, username: str, correlation_id: UUID) -> None:
        self._build_and_log(
            AuditEventBuilder.logout,
            username=username,
            correlation_id=correlation_id,
        )

    def log_expense_added(
        self,
        category: str,
        amount: float,
        username: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an expense appended to the ledger."""
        self._build_and_log(
            AuditEventBuilder.expense_added,
            category=category,
            amount=amount,
            username=username,
            correlation_id=correlation_id,
        )

    def log_snapshot_saved(
        self,
        filename: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._build_and_log(
            AuditEventBuilder.snapshot_saved,
            filename=filename,
            record_count=record_count,
            correlation_id=correlation_id,
        )

    def log_snapshot_loaded(
        self,
        filename: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._build_and_log(
            AuditEventBuilder.snapshot_loaded,
            filename=filename,
            record_count=record_count,
            correlation_id=correlation_id,
        )

    def log_persistence_failed(
        self,
        operation: str,
        filename: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed save or load."""
        self._build_and_log(
            AuditEventBuilder.persistence_failed,
            operation=operation,
            filename=filename,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_invalid_input(
        self,
        menu: str,
        raw_value: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._build_and_log(
            AuditEventBuilder.invalid_input,
            menu=menu,
            raw_value=raw_value,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The shell creates one per successful login and passes it to
    every event logged until logout.
    """
    return uuid4()
