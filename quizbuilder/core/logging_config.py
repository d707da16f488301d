"""
Logging setup for the quiz builder service and CLI.

Production emits one JSON object per line; development gets short colored
lines. Logs go to stderr so the CLI can print quiz JSON on stdout.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Optional, Union

SERVICE_NAME = "quiz-builder"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "uvicorn.access")

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _record_extras(record: logging.LogRecord) -> dict:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including any `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(_record_extras(record))

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line formatter for local runs."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[34m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{time_str} {color}{record.levelname:<7}{self.RESET} {record.name} | {record.getMessage()}"

        extras = _record_extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _rotating_file_handler(path: Path, level: int = logging.NOTSET) -> logging.Handler:
    # 5 MB per file, 3 backups
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    environment: str = "development",
    log_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        environment: "production" switches the console output to JSON
        log_level: Root level name; unknown names fall back to INFO
        log_dir: Where quiz-builder.log and quiz-builder-errors.log go (None = no files)
        stream: Console stream (stderr by default)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(JSONFormatter() if environment == "production" else ConsoleFormatter())
    root.addHandler(console)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_file_handler(log_dir / f"{SERVICE_NAME}.log"))
        root.addHandler(_rotating_file_handler(log_dir / f"{SERVICE_NAME}-errors.log", logging.ERROR))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging ready: environment={environment}, level={log_level}, log_dir={log_dir}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
