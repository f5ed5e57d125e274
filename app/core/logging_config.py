"""
Logging setup for Quizz AI.

Development gets colored one-line console output; production gets one JSON
object per line. Every record carries the ID of the HTTP request that
produced it ("-" outside a request), so a quiz generation can be followed
from upload to the final event.
"""

import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

# Provider SDKs and their HTTP stack log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "groq")

LOG_FILE = "quizz-ai.log"
ERROR_LOG_FILE = "quizz-ai-errors.log"


class RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Colored console output for development."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        request_id = getattr(record, "request_id", "-")

        # 12:00:01 [INFO] app.services.quiz_service [a1b2c3] - message
        line = f"{clock} {color}[{record.levelname}]{self.RESET} {record.name}"
        if request_id != "-":
            line += f" [{request_id}]"
        line += f" - {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _file_handler(path: Path, level: int, request_ids: logging.Filter) -> logging.Handler:
    # 10MB per file, 5 backups
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(request_ids)
    return handler


def setup_logging(
    environment: str = "development",
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        environment: "production" switches the console to JSON output
        log_level: Minimum level name, e.g. "INFO"
        log_dir: Also write rotating JSON log files here (None = console only)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    request_ids = RequestIDFilter()
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(JSONFormatter() if environment == "production" else ConsoleFormatter())
    console.addFilter(request_ids)
    root.addHandler(console)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(log_dir / LOG_FILE, logging.NOTSET, request_ids))
        root.addHandler(_file_handler(log_dir / ERROR_LOG_FILE, logging.ERROR, request_ids))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(
        f"Logging configured: environment={environment}, level={logging.getLevelName(level)}, "
        f"log_dir={log_dir or '-'}"
    )
