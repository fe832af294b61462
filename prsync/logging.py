"""Logging for the prsync CLI.

Level and format come from config.yaml (logging.level, logging.format) or
env (LOGGING_LEVEL, LOGGING_FORMAT). At DEBUG every page request is logged
by prsync.adapters.pagination; urllib3's connection chatter stays at INFO
so it does not drown those lines. Bitbucket credentials given to
PrSyncLogging are masked in every record written by the root handlers.
"""

import logging
from typing import Iterable

from prsync.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "prsync"
MASK = "***"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class SecretMaskingFilter(logging.Filter):
    """Replaces credentials in the formatted message with ***."""

    def __init__(self, secrets: Iterable[str | None]) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def _mask(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        masked = self._mask(message)
        if masked != message:
            record.msg = masked
            record.args = None
        # The traceback repeats the exception message
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self._mask(record.exc_text)
        return True


class PrSyncLogging:
    """Configures root logging from LoggingConfig for the prsync CLI."""

    def __init__(self, config: LoggingConfig, secrets: Iterable[str | None] = ()) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT
        self._filter = SecretMaskingFilter(secrets)

    def setup(self) -> None:
        """Apply level, format and secret masking to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        for handler in logging.getLogger().handlers:
            handler.addFilter(self._filter)
        logging.getLogger("urllib3").setLevel(max(self._level, logging.INFO))

    def get_logger(self, name: str) -> logging.Logger:
        """Return the logger prsync.<name>."""
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
