"""Apply :class:`LoggingConfig` to the ``examiner`` logger tree.

Records go to stderr unless a file is configured, so the MCP stdio
channel on stdout is never written to.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from examiner.core.errors import ConfigError

if TYPE_CHECKING:
    from examiner.config.schema import LoggingConfig

_ROOT_LOGGER = "examiner"
_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Install a single handler on the ``examiner`` logger.

    Calling this again replaces the previous handler.

    Raises:
        ConfigError: If the level name is unknown or the log file
            cannot be opened.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        msg = f"Unknown log level: {config.level}"
        raise ConfigError(msg)

    handler: logging.Handler
    if config.file:
        log_path = Path(config.file).expanduser()
        try:
            handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            msg = f"Cannot open log file {log_path}: {e}"
            raise ConfigError(msg) from e
    else:
        handler = logging.StreamHandler(sys.stderr)

    if config.structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    logger = logging.getLogger(_ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
