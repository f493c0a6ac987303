"""Tests for structured event logging."""

import importlib
import json
import logging
from pathlib import Path

from catalog_admin import config
from catalog_admin.logging_config import get_logger, log_admin_event, setup_logging


def _read_entries(log_dir):
    files = list(log_dir.glob("admin_*.jsonl"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]


class TestLogAdminEvent:
    def test_event_written_as_jsonl(self, tmp_path):
        """Events should land in the daily JSONL file with their data."""
        setup_logging(log_to_console=False, log_dir=tmp_path)
        log_admin_event("record_create", {"resource": "category", "name": "Lighting"})

        entries = _read_entries(tmp_path)
        assert entries[-1]["event_type"] == "record_create"
        assert entries[-1]["resource"] == "category"
        assert entries[-1]["level"] == "INFO"

    def test_secrets_redacted(self, tmp_path):
        """Passwords and tokens must never reach the log file."""
        setup_logging(log_to_console=False, log_dir=tmp_path)
        log_admin_event("login_error", {"email": "a@b.co", "password": "hunter2", "access_token": "tok"})

        raw = next(tmp_path.glob("admin_*.jsonl")).read_text(encoding="utf-8")
        assert "hunter2" not in raw
        entry = _read_entries(tmp_path)[-1]
        assert entry["password"] == "***"
        assert entry["access_token"] == "***"
        assert entry["email"] == "a@b.co"

    def test_message_key_used_as_message(self, tmp_path):
        setup_logging(log_to_console=False, log_dir=tmp_path)
        log_admin_event("dashboard", {"message": "Dashboard loaded", "products": 3})
        entry = _read_entries(tmp_path)[-1]
        assert entry["message"] == "Dashboard loaded"
        assert entry["products"] == 3

    def test_file_captures_debug(self, tmp_path):
        """The file keeps debug events even when the console is quieter."""
        setup_logging(level=logging.WARNING, log_to_console=False, log_dir=tmp_path)
        log_admin_event("list_fetch", {"count": 1}, level=logging.DEBUG)
        assert _read_entries(tmp_path)[-1]["level"] == "DEBUG"


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("http").name == "catalog_admin.http"
        assert get_logger("catalog_admin.cli").name == "catalog_admin.cli"
        assert get_logger().name == "catalog_admin"


class TestLogLocation:
    def _reload_with(self, monkeypatch, **env):
        for name in ("CATALOG_ADMIN_HOME", "CATALOG_ADMIN_LOG_DIR", "CATALOG_ADMIN_SESSION"):
            monkeypatch.delenv(name, raising=False)
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(config)

    def test_default_is_per_user_not_install_dir(self, monkeypatch, tmp_path):
        """Logs and the session live in the user's state dir, never beside the package."""
        try:
            reloaded = self._reload_with(monkeypatch, CATALOG_ADMIN_HOME=str(tmp_path / "home"))
            assert reloaded.LOG_DIR == tmp_path / "home" / "logs"
            assert reloaded.SESSION_FILE == tmp_path / "home" / "session.json"
            package_root = Path(config.__file__).resolve().parent.parent
            assert package_root not in reloaded.LOG_DIR.parents
        finally:
            monkeypatch.undo()
            importlib.reload(config)

    def test_env_override(self, monkeypatch, tmp_path):
        try:
            reloaded = self._reload_with(monkeypatch, CATALOG_ADMIN_LOG_DIR=str(tmp_path / "audit"))
            assert reloaded.LOG_DIR == tmp_path / "audit"
        finally:
            monkeypatch.undo()
            importlib.reload(config)
