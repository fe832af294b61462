"""Tests for prsync.logging (PrSyncLogging, level/format from config)."""

import logging
import sys

import pytest

from prsync.config import LoggingConfig
from prsync.logging import (
    DEFAULT_FORMAT,
    LEVELS,
    MASK,
    PrSyncLogging,
    SecretMaskingFilter,
    _resolve_level,
)


@pytest.fixture
def restore_logging():
    """Undo root and urllib3 logger changes made by setup()."""
    root = logging.getLogger()
    urllib3 = logging.getLogger("urllib3")
    saved = root.level, root.handlers[:], urllib3.level
    yield root
    for handler in root.handlers:
        if handler not in saved[1]:
            handler.close()
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    urllib3.setLevel(saved[2])


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("prsync.cli", logging.INFO, __file__, 1, msg, args, None)


class TestConstants:
    """Module constants and level mapping."""

    def test_levels_has_four_standard_levels(self) -> None:
        assert LEVELS == {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
        }

    def test_default_format_contains_placeholders(self) -> None:
        assert "%(levelname)s" in DEFAULT_FORMAT
        assert "%(message)s" in DEFAULT_FORMAT


class TestResolveLevel:
    """_resolve_level maps level names to logging constants."""

    def test_known_levels(self) -> None:
        assert _resolve_level("DEBUG") == logging.DEBUG
        assert _resolve_level("WARNING") == logging.WARNING

    def test_lowercase_and_whitespace_normalized(self) -> None:
        assert _resolve_level("  debug ") == logging.DEBUG

    def test_unknown_level_returns_info(self) -> None:
        """Unknown level name falls back to INFO."""
        assert _resolve_level("TRACE") == logging.INFO


class TestSecretMaskingFilter:
    def test_masks_secret_in_formatted_message(self) -> None:
        record = _record("token request failed: %s", "client_secret=s3cr3t")
        assert SecretMaskingFilter(["s3cr3t"]).filter(record) is True
        assert record.getMessage() == f"token request failed: client_secret={MASK}"

    def test_message_without_secret_is_untouched(self) -> None:
        record = _record("Approved pull request %d", 7)
        SecretMaskingFilter(["s3cr3t"]).filter(record)
        assert record.msg == "Approved pull request %d"
        assert record.args == (7,)

    def test_masks_secret_in_traceback(self) -> None:
        try:
            raise RuntimeError("rejected key s3cr3t")
        except RuntimeError:
            record = logging.LogRecord("prsync.cli", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        SecretMaskingFilter(["s3cr3t"]).filter(record)
        assert "s3cr3t" not in record.exc_text
        assert f"rejected key {MASK}" in record.exc_text

    def test_unset_secrets_are_ignored(self) -> None:
        record = _record("nothing to hide")
        SecretMaskingFilter([None, ""]).filter(record)
        assert record.getMessage() == "nothing to hide"


class TestPrSyncLogging:
    def test_setup_applies_level_and_format(self, restore_logging) -> None:
        """setup() configures the root logger from config."""
        PrSyncLogging(LoggingConfig(level="ERROR", format="%(levelname)s|%(message)s")).setup()
        assert restore_logging.level == logging.ERROR
        assert restore_logging.handlers[-1].formatter._fmt == "%(levelname)s|%(message)s"

    def test_empty_format_uses_default(self) -> None:
        assert PrSyncLogging(LoggingConfig(format=""))._format == DEFAULT_FORMAT

    def test_setup_masks_secrets_in_handler_output(self, restore_logging, capsys) -> None:
        PrSyncLogging(LoggingConfig(level="INFO", format="%(message)s"), secrets=("key-123", None)).setup()
        logging.getLogger("prsync.cli").error("GET failed with key %s", "key-123")
        err = capsys.readouterr().err
        assert "key-123" not in err
        assert f"GET failed with key {MASK}" in err

    def test_debug_keeps_urllib3_at_info(self, restore_logging) -> None:
        PrSyncLogging(LoggingConfig(level="DEBUG")).setup()
        assert logging.getLogger("urllib3").level == logging.INFO

    def test_warning_applies_to_urllib3(self, restore_logging) -> None:
        PrSyncLogging(LoggingConfig(level="WARNING")).setup()
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_get_logger_is_under_prsync(self) -> None:
        assert PrSyncLogging(LoggingConfig()).get_logger("cli").name == "prsync.cli"
