import datetime as dt
import json
import copy
from typing import override
import logging
import logging.config
import atexit
from pathlib import Path

# attributes every LogRecord has; anything else came in through ``extra=``
LOG_RECORD_BUILTIN_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record; ``fmt_keys`` maps output keys to record attributes."""

    def __init__(self, *, fmt_keys: dict[str, str] | None = None):
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    @override
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self._record_dict(record), default=str)

    def _record_dict(self, record: logging.LogRecord) -> dict:
        computed = {
            "message": record.getMessage(),
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
        }
        if record.exc_info is not None:
            computed["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info is not None:
            computed["stack_info"] = self.formatStack(record.stack_info)

        out = {
            key: value
            if (value := computed.pop(attr, None)) is not None
            else getattr(record, attr)
            for key, attr in self.fmt_keys.items()
        }
        out.update(computed)

        # e.g. logger.debug("...", extra={"torrent": path})
        out.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in LOG_RECORD_BUILTIN_ATTRS
        )
        return out


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[%(levelname)s|%(module)s|L%(lineno)d] %(asctime)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "json": {
            "()": JSONLogFormatter,
            "fmt_keys": {
                "level": "levelname",
                "message": "message",
                "timestamp": "timestamp",
                "logger": "name",
                "module": "module",
                "function": "funcName",
                "line": "lineno",
            },
        },
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
        "file_json": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": "default",
            "maxBytes": 5000000,
            "backupCount": 5,
        },
        "queue_handler": {
            "class": "logging.handlers.QueueHandler",
            "handlers": ["stderr", "file_json"],
            "respect_handler_level": True,
        },
    },
    "loggers": {"root": {"level": "DEBUG", "handlers": ["queue_handler"]}},
}


def config_logging(
    file_name: str | None,
    *,
    log_dir: Path = Path("data") / "logs",
    verbose: bool = False,
):
    """
    Log to stderr (WARNING, or DEBUG when ``verbose``) and, unless
    ``file_name`` is None, to a rotating JSON-lines file under ``log_dir``.
    """
    d_config = copy.deepcopy(LOGGING_CONFIG)
    if verbose:
        d_config["handlers"]["stderr"]["level"] = "DEBUG"

    if file_name is None:
        del d_config["handlers"]["file_json"]
        d_config["handlers"]["queue_handler"]["handlers"] = ["stderr"]
    else:
        log_path = log_dir / file_name
        log_path.parent.mkdir(parents=True, exist_ok=True)
        d_config["handlers"]["file_json"]["filename"] = str(log_path)

    # handlers run on the queue listener thread, stopped at exit
    logging.config.dictConfig(d_config)
    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None:
        queue_handler.listener.start()
        atexit.register(queue_handler.listener.stop)
    return queue_handler
