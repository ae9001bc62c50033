import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from rich.logging import RichHandler

from hive.main.config import get_loglevel
from hive.main.request_context import get_request_context


JSON_LOGS_ENABLED = os.getenv("JSON_LOGS", "true").lower() in {"1", "true", "yes", "on"}

# Attributes every LogRecord carries; anything else on a record came from `extra=`
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}

_SQLALCHEMY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "sqlalchemy.dialects",
)


class ContextJSONFormatter(logging.Formatter):
    """One JSON object per record.

    The base fields come first, then the request context (correlation id, org id),
    then whatever the call site passed in ``extra``. ``None`` values are left out.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        for source in (get_request_context(), extra):
            for key, value in source.items():
                if value is not None:
                    payload.setdefault(key, value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        return json.dumps(payload, default=str)


def _configure_library_loggers(level: int) -> None:
    third_party_level = logging.INFO if level <= logging.DEBUG else logging.CRITICAL
    for name in list(logging.root.manager.loggerDict):
        logging.getLogger(name).setLevel(third_party_level)

    # SQLAlchemy stays at WARNING whatever the level above
    for name in _SQLALCHEMY_LOGGERS:
        sa_logger = logging.getLogger(name)
        sa_logger.setLevel(logging.WARNING)
        sa_logger.propagate = False


_configure_library_loggers(get_loglevel())


class SimpleLogger(logging.Logger):
    def __init__(self, name="main", level=logging.WARNING):
        logging.Logger.__init__(self, name, level)
        handler: logging.Handler
        if JSON_LOGS_ENABLED:
            handler = logging.StreamHandler(stream=sys.stdout)
            handler.setFormatter(ContextJSONFormatter())
        else:
            handler = RichHandler(rich_tracebacks=True, markup=True, show_path=True)
        handler.setLevel(level)
        self.addHandler(handler)


def get_logger(module_name: str):
    return SimpleLogger(name=module_name, level=get_loglevel())
