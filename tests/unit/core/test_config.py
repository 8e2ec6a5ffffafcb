"""Tests for settings, logging setup and token helpers."""

import logging
from datetime import timedelta

import pytest
from jose import jwt

from hrms.common.logger import configure_logging, setup_logger
from hrms.core.config import Settings
from hrms.core.security import create_access_token, decode_token


class TestSettings:
    """Test settings loading."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.algorithm == "HS256"
        assert settings.roles_file is None
        assert settings.file_logging is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("HRMS_ROLES_FILE", "/etc/hrms/roles.yaml")
        monkeypatch.setenv("HRMS_LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)
        assert settings.roles_file == "/etc/hrms/roles.yaml"
        assert settings.log_level == "debug"

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a.local, http://b.local,")
        assert settings.cors_origins_list == ["http://a.local", "http://b.local"]


def _reset_handlers(logger):
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestLogger:
    """Test logging channel setup."""

    def test_console_only(self):
        logger = setup_logger("hrms-test-console", level="warning")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_file_logging(self, tmp_path):
        log_file = tmp_path / "nested" / "payroll.log"
        logger = setup_logger("hrms-test-file", log_file=log_file, console=False)
        logger.info("payroll run finished")
        for handler in logger.handlers:
            handler.flush()
        assert "payroll run finished" in log_file.read_text()

    def test_repeat_setup_updates_level_only(self):
        setup_logger("hrms-test-dup")
        logger = setup_logger("hrms-test-dup", level="ERROR")
        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger("hrms-test-bad", level="LOUD")

    def test_configure_logging_channels(self, tmp_path):
        """Test the application and audit channels get separate files."""
        for name in ("hrms", "hrms.audit"):
            _reset_handlers(logging.getLogger(name))

        settings = Settings(
            _env_file=None, log_dir=str(tmp_path), file_logging=True, log_level="WARNING",
        )
        app_logger = configure_logging(settings)
        audit_logger = logging.getLogger("hrms.audit")
        try:
            assert app_logger.name == "hrms"
            assert app_logger.level == logging.WARNING
            assert audit_logger.level == logging.INFO

            audit_logger.info("create /api/payroll module=payroll user=hr-1")
            for handler in audit_logger.handlers:
                handler.flush()
            assert "[AUDIT] create /api/payroll" in (tmp_path / "audit.log").read_text()
            assert (tmp_path / "hrms.log").exists()
        finally:
            _reset_handlers(app_logger)
            _reset_handlers(audit_logger)


class TestTokens:
    """Test JWT helpers."""

    def test_round_trip(self, settings):
        token = create_access_token("user-42", settings)
        assert decode_token(token, settings) == "user-42"

    def test_wrong_secret(self, settings):
        token = create_access_token("user-42", settings)
        other = Settings(_env_file=None, secret_key="another-secret")
        assert decode_token(token, other) is None

    def test_expired(self, settings):
        token = create_access_token("user-42", settings, expires_delta=timedelta(seconds=-10))
        assert decode_token(token, settings) is None

    def test_sub_claim_accepted(self, settings):
        token = jwt.encode({"sub": "user-7"}, settings.secret_key, algorithm=settings.algorithm)
        assert decode_token(token, settings) == "user-7"

    def test_missing_user_claim(self, settings):
        token = jwt.encode({"role": "Finance"}, settings.secret_key, algorithm=settings.algorithm)
        assert decode_token(token, settings) is None

    def test_garbage(self, settings):
        assert decode_token("not-a-token", settings) is None
