"""diskmemcache.core.log

Log records are events: a snake_case name plus structured ``extra`` fields.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from diskmemcache.core.config import LoggingConfig

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k not in _RESERVED and not k.startswith("_"):
                payload[k] = v
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(cfg: LoggingConfig, *, logger_name: str = "diskmemcache") -> logging.Logger:
    """Attach a stderr handler to the package logger. Idempotent."""

    logger = logging.getLogger(logger_name)
    logger.setLevel(cfg.level.upper())

    for h in list(logger.handlers):
        if getattr(h, "_diskmemcache", False):
            logger.removeHandler(h)

    handler = logging.StreamHandler()
    handler._diskmemcache = True  # type: ignore[attr-defined]
    if cfg.json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
