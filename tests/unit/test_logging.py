"""Unit tests for logging_audit module."""

import logging
from pathlib import Path

import pytest

from hipay_professional.logging_audit import (
    CredentialRedactingFormatter,
    configure_logging,
    get_logger,
    log_transaction,
    redact_credentials,
)
from hipay_professional.logging_audit import logger as logger_module


def own_handlers():
    """Return the root handlers installed by configure_logging."""
    return [
        handler
        for handler in logging.getLogger().handlers
        if isinstance(handler.formatter, CredentialRedactingFormatter)
    ]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove the handlers installed by configure_logging."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in own_handlers():
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)
    logger_module._logging_configured = False


class TestRedactCredentials:
    """Test credential masking."""

    def test_xml_credentials(self):
        """Test credential elements of a SOAP body are masked."""
        body = (
            "<parameters><wsLogin>my-login</wsLogin><wsPassword>s3cret</wsPassword>"
            "<wsSubAccountLogin>sub</wsSubAccountLogin><amount>9.99</amount></parameters>"
        )

        redacted = redact_credentials(body)

        assert "my-login" not in redacted
        assert "s3cret" not in redacted
        assert "sub<" not in redacted
        assert "<wsPassword>[REDACTED]</wsPassword>" in redacted
        assert "<amount>9.99</amount>" in redacted

    @pytest.mark.parametrize(
        "message",
        ["password=s3cret", "Password: s3cret", "login='s3cret'"],
    )
    def test_key_value_credentials(self, message):
        """Test key/value forms are masked."""
        assert "s3cret" not in redact_credentials(message)

    def test_other_text_untouched(self):
        message = "HiPay confirm completed: success=True"

        assert redact_credentials(message) == message


class TestCredentialRedactingFormatter:
    """Test the formatter."""

    def _record(self, message: str) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)

    def test_redacts(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s")

        assert formatter.format(self._record("<wsPassword>x</wsPassword>")) == (
            "<wsPassword>[REDACTED]</wsPassword>"
        )

    def test_redaction_disabled(self):
        formatter = CredentialRedactingFormatter(fmt="%(message)s", redact=False)

        assert formatter.format(self._record("password=x")) == "password=x"


class TestConfigureLogging:
    """Test logging configuration."""

    def test_configure_logging_creates_file(self, tmp_path):
        """Test logging configuration creates log file."""
        # Arrange
        log_file = tmp_path / "logs" / "test.log"

        # Act
        configure_logging(level="INFO", log_file=log_file)
        get_logger(__name__).info("Test message")

        # Assert
        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_file_redacts_credentials(self, tmp_path):
        """Test credentials never reach the log file."""
        log_file = tmp_path / "test.log"

        configure_logging(level="INFO", log_file=log_file)
        get_logger(__name__).info("<wsPassword>s3cret</wsPassword>")

        assert "s3cret" not in log_file.read_text()

    def test_console_level(self, tmp_path):
        """Test console handler uses the requested level, file handler DEBUG."""
        configure_logging(level="WARNING", log_file=tmp_path / "test.log")

        levels = {type(handler).__name__: handler.level for handler in own_handlers()}
        assert levels["StreamHandler"] == logging.WARNING
        assert levels["RotatingFileHandler"] == logging.DEBUG

    def test_idempotent(self, tmp_path):
        """Test repeated calls do not duplicate handlers."""
        configure_logging(level="INFO", log_file=tmp_path / "test.log")
        configure_logging(level="INFO", log_file=tmp_path / "test.log")

        assert len(own_handlers()) == 2

    def test_foreign_handlers_kept(self, tmp_path):
        """Test reconfiguring leaves handlers installed by the application."""
        app_handler = logging.NullHandler()
        logging.getLogger().addHandler(app_handler)
        try:
            configure_logging(level="INFO", log_file=tmp_path / "test.log")
            configure_logging(level="DEBUG", log_file=tmp_path / "test.log")

            assert app_handler in logging.getLogger().handlers
        finally:
            logging.getLogger().removeHandler(app_handler)

    def test_invalid_level(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD", log_file=tmp_path / "test.log")

    def test_log_file_from_environment(self, tmp_path, monkeypatch):
        """Test HIPAY_LOG_FILE is used when no path is given."""
        log_file = tmp_path / "env.log"
        monkeypatch.setenv("HIPAY_LOG_FILE", str(log_file))

        configure_logging(level="INFO")
        get_logger(__name__).info("From env")

        assert "From env" in Path(log_file).read_text()


class TestLogTransaction:
    """Test audit trail records."""

    def test_success_summary(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="hipay_professional.audit"):
            correlation_id = log_transaction(
                "confirm",
                "https://test-ws.hipay.com/soap/transaction-v2/confirm",
                "<wsPassword>s3cret</wsPassword>",
                "<ok/>",
            )

        summary = caplog.records[0]
        assert summary.levelno == logging.INFO
        assert "TRANSACTION [confirm]" in summary.getMessage()
        assert f"correlation_id={correlation_id}" in summary.getMessage()
        assert "status=success" in summary.getMessage()
        assert "s3cret" not in caplog.text
        assert "<ok/>" in caplog.text

    def test_failure_logged_as_error(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="hipay_professional.audit"):
            log_transaction("card", "https://x/soap/refund-v2/card", "<a/>", None, "failure", "boom")

        summary = caplog.records[0]
        assert summary.levelno == logging.ERROR
        assert "error_message=boom" in summary.getMessage()
        assert "response_size=0 bytes" in summary.getMessage()
        assert len(caplog.records) == 2
