from __future__ import annotations

import json
import logging

from diskmemcache.core.config import LoggingConfig
from diskmemcache.core.log import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("diskmemcache.core.cache", logging.INFO, __file__, 1, "cache_write", None, None)
    record.key = "prices"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "cache_write"
    assert payload["level"] == "INFO"
    assert payload["key"] == "prices"


def test_configure_logging_is_idempotent() -> None:
    name = "diskmemcache.test_configure"
    configure_logging(LoggingConfig(level="debug"), logger_name=name)
    logger = configure_logging(LoggingConfig(level="warning", json_output=True), logger_name=name)

    ours = [h for h in logger.handlers if getattr(h, "_diskmemcache", False)]
    assert len(ours) == 1
    assert isinstance(ours[0].formatter, JsonFormatter)
    assert logger.level == logging.WARNING
