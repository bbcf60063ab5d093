"""Tests for settings, logging configuration and the audit logger."""

import io
import logging

import pytest
import structlog
from pydantic import ValidationError
from rich.console import Console
from structlog.testing import capture_logs

from expense_manager.audit import AuditLogger, configure_logging, create_correlation_id
from expense_manager.config import (
    AppSettings,
    LoggingSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from expense_manager.models.audit import AuditEventBuilder
from expense_manager.orchestrator import create_app_components, main


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    for name in (
        "EXPENSE_MANAGER_LOG_LEVEL",
        "EXPENSE_MANAGER_LOG_JSON_FORMAT",
        "EXPENSE_MANAGER_LOG_FILE",
        "EXPENSE_MANAGER_STORAGE_ENCODING",
        "EXPENSE_MANAGER_STORAGE_FSYNC",
        "EXPENSE_MANAGER_DEBUG_MODE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    package_logger = logging.getLogger("expense_manager")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    structlog.reset_defaults()


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_defaults_need_no_environment(self):
        settings = get_settings()
        assert settings.logging.level == "WARNING"
        assert settings.logging.json_format is False
        assert settings.logging.file is None
        assert settings.storage.encoding == "utf-8"
        assert settings.storage.fsync is True
        assert settings.app.debug_mode is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_MANAGER_LOG_LEVEL", "debug")
        monkeypatch.setenv("EXPENSE_MANAGER_LOG_JSON_FORMAT", "true")
        monkeypatch.setenv("EXPENSE_MANAGER_STORAGE_FSYNC", "false")
        monkeypatch.setenv("EXPENSE_MANAGER_DEBUG_MODE", "1")

        assert LoggingSettings().level == "DEBUG"
        assert LoggingSettings().json_format is True
        assert StorageSettings().fsync is False
        assert AppSettings().debug_mode is True

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            LoggingSettings(level="chatty")

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"logging": True, "storage": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("EXPENSE_MANAGER_LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["logging"] is False
        assert "Unknown log level" in results["logging_error"]
        assert results["storage"] is True

    def test_settings_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for structlog configuration."""

    def test_logs_go_to_file(self, tmp_path):
        log_file = tmp_path / "audit.log"
        configure_logging(LoggingSettings(level="INFO", file=log_file))

        AuditLogger().log(AuditEventBuilder.user_registered("alice"))

        logging.getLogger("expense_manager").handlers[0].flush()
        contents = log_file.read_text(encoding="utf-8")
        assert "audit_event" in contents
        assert "user_registered" in contents

    def test_level_filters_events(self, tmp_path):
        log_file = tmp_path / "audit.log"
        configure_logging(LoggingSettings(level="WARNING", file=log_file))

        AuditLogger().log(AuditEventBuilder.user_registered("alice"))
        AuditLogger().log(AuditEventBuilder.login_failed("bob"))

        logging.getLogger("expense_manager").handlers[0].flush()
        contents = log_file.read_text(encoding="utf-8")
        assert "user_registered" not in contents
        assert "login_failed" in contents

    def test_json_renderer(self, tmp_path):
        log_file = tmp_path / "audit.log"
        configure_logging(LoggingSettings(level="INFO", json_format=True, file=log_file))

        AuditLogger().log(AuditEventBuilder.user_registered("alice"))

        logging.getLogger("expense_manager").handlers[0].flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert line.startswith("{")
        assert '"event_type": "user_registered"' in line

    def test_debug_flag_overrides_level(self):
        configure_logging(LoggingSettings(level="ERROR"), debug=True)
        assert logging.getLogger("expense_manager").level == logging.DEBUG

    def test_reconfigure_replaces_handler(self):
        configure_logging(LoggingSettings())
        configure_logging(LoggingSettings())
        assert len(logging.getLogger("expense_manager").handlers) == 1


class TestAuditLogger:
    """Tests for the AuditLogger service."""

    def test_severity_maps_to_level(self):
        audit = AuditLogger()
        with capture_logs() as logs:
            audit.log_user_registered("alice")
            audit.log_login_failed("alice")
            audit.log_persistence_failed("save", "a.json", "denied")
            audit.log_invalid_input("main_menu", "9")

        assert [entry["log_level"] for entry in logs] == ["info", "warning", "error", "debug"]

    def test_typed_helpers_carry_details(self):
        audit = AuditLogger()
        correlation_id = create_correlation_id()
        with capture_logs() as logs:
            audit.log_snapshot_saved("a.json", 3, correlation_id)

        entry = logs[0]
        assert entry["event"] == "audit_event"
        assert entry["event_type"] == "snapshot_saved"
        assert entry["details"] == {"filename": "a.json", "record_count": 3}
        assert entry["correlation_id"] == str(correlation_id)

    def test_log_returns_true(self):
        with capture_logs():
            assert AuditLogger().log(AuditEventBuilder.user_registered("alice")) is True

    def test_unbuildable_event_does_not_raise(self, monkeypatch, capsys):
        def broken(username):
            raise ValueError("bad event")

        monkeypatch.setattr(AuditEventBuilder, "user_registered", broken)

        AuditLogger().log_user_registered("alice")

        assert "bad event" in capsys.readouterr().err


class TestAppComponents:
    """Tests for the application factory."""

    def test_components_are_wired_together(self):
        out = io.StringIO()
        shell, credentials, ledger = create_app_components(
            console=Console(file=out, color_system=None),
            stdin=io.StringIO("1\nalice\npw1\n2\nalice\npw1\n1\nFood\n2.5\n7\n3\n"),
        )
        shell.run()

        assert credentials.authenticate("alice", "pw1")
        assert [r.amount for r in ledger.all()] == [2.5]
        assert "Goodbye!" in out.getvalue()

    def test_each_call_builds_fresh_state(self):
        _, credentials_a, ledger_a = create_app_components()
        _, credentials_b, ledger_b = create_app_components()
        credentials_a.register("alice", "pw1")
        ledger_a.add("Food", 1.0)
        assert "alice" not in credentials_b
        assert len(ledger_b) == 0

    def test_main_runs_until_exit(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("1\nalice\npw1\n3\n"))

        assert main() == 0

        out = capsys.readouterr().out
        assert "Registration successful!" in out
        assert "Goodbye!" in out

    def test_main_rejects_invalid_configuration(self, monkeypatch, capsys):
        monkeypatch.setenv("EXPENSE_MANAGER_LOG_LEVEL", "chatty")

        assert main() == 2

        err = capsys.readouterr().err
        assert "Invalid configuration:" in err
        assert "logging:" in err
