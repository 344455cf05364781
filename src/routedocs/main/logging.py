import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from rich.logging import RichHandler

from routedocs.main.config import get_loglevel


JSON_LOGS_ENABLED = os.getenv("JSON_LOGS", "true").lower() in {"1", "true", "yes", "on"}


class JSONLinesFormatter(logging.Formatter):
    """One JSON object per record.

    Keys passed through ``extra=`` are added next to the standard fields
    unless they are None.
    """

    RESERVED_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }

    def format(self, record: logging.LogRecord) -> str:
        log: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self.RESERVED_ATTRS or key.startswith("_"):
                continue
            if value is None:
                continue
            log.setdefault(key, value)

        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log["stack"] = record.stack_info

        return json.dumps(log, default=str)


class SimpleLogger(logging.Logger):
    def __init__(
        self,
        name="routedocs",
        level=logging.WARNING,
        console=True,
    ):
        logging.Logger.__init__(self, name, level)

        if console is not True:
            return

        handler: logging.Handler
        if JSON_LOGS_ENABLED:
            handler = logging.StreamHandler(stream=sys.stdout)
            handler.setFormatter(JSONLinesFormatter())
        else:
            # RichHandler has its own formatting
            handler = RichHandler(rich_tracebacks=True, markup=False, show_path=True)
        handler.setLevel(level)
        self.addHandler(handler)


_loggers: dict[str, SimpleLogger] = {}


def get_logger(module_name: str) -> logging.Logger:
    # One logger per module, so handlers are not stacked on repeated calls
    if module_name not in _loggers:
        _loggers[module_name] = SimpleLogger(name=module_name, level=get_loglevel())
    return _loggers[module_name]
