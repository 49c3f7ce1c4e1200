import datetime as dt
import json
import copy
from typing import override
import logging
import logging.config
import atexit
from pathlib import Path

# attributes every LogRecord carries; anything else came in through extra=
LOG_RECORD_BUILTIN_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

DEFAULT_LOG_DIR = Path("data") / "logs"

_active_listener = None


class JSONLogFormatter(logging.Formatter):
    # fmt_keys maps output key -> LogRecord attribute
    def __init__(
        self,
        *,
        fmt_keys: dict[str, str] | None = None,
    ):
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    @override
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self._prepare_log_dict(record), default=str)

    def _prepare_log_dict(self, record: logging.LogRecord) -> dict:
        message = {key: getattr(record, attr) for key, attr in self.fmt_keys.items()}
        message["message"] = record.getMessage()
        message["timestamp"] = dt.datetime.fromtimestamp(
            record.created, tz=dt.timezone.utc
        ).isoformat()
        if record.exc_info is not None:
            message["exc_info"] = self.formatException(record.exc_info)

        # target, file_count, piece_count ... passed with extra=
        for key, val in record.__dict__.items():
            if key not in LOG_RECORD_BUILTIN_ATTRS:
                message[key] = val

        return message


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
                "logger": "name",
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
    "loggers": {"root": {"level": "INFO", "handlers": ["queue_handler"]}},
}


def stop_logging():
    """Flush pending records and stop the listener thread."""
    global _active_listener
    if _active_listener is not None:
        _active_listener.stop()
        _active_listener = None


def config_logging(
    file_name: str | Path,
    *,
    verbose: bool = False,
    log_dir: Path = DEFAULT_LOG_DIR,
) -> Path:
    """Configure the root logger and start the queue listener thread.

    Relative file names are placed under ``log_dir``. Calling this again
    replaces the previous configuration. Returns the log file path.
    """
    global _active_listener

    log_path = Path(file_name)
    if not log_path.is_absolute():
        log_path = Path(log_dir) / log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    d_config = copy.deepcopy(LOGGING_CONFIG)
    d_config["handlers"]["file_json"]["filename"] = str(log_path)
    if verbose:
        d_config["loggers"]["root"]["level"] = "DEBUG"
        d_config["handlers"]["stderr"]["level"] = "DEBUG"

    stop_logging()
    logging.config.dictConfig(d_config)
    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None:
        queue_handler.listener.start()
        _active_listener = queue_handler.listener
        atexit.unregister(stop_logging)
        atexit.register(stop_logging)

    return log_path
