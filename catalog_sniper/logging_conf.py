"""Logging configuration built around structlog with JSON log files."""

from __future__ import annotations

import logging
import logging.config
import os
from pathlib import Path

import structlog

_LOGGING_INITIALISED = False

# LogRecord attributes that must not leak into JSON output as "extra" fields
_RESERVED_ATTRS = sorted(
    set(vars(logging.makeLogRecord({})))
    | {"message", "asctime", "taskName", "_logger", "_name", "_from_structlog", "_record"}
)


def _default_log_dir() -> Path:
    root = os.environ.get("CATALOG_SNIPER_HOME")
    base = Path(root).expanduser() if root else Path.cwd()
    return base / "logs"


def configure_logging(verbose: bool = False, log_dir: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger."""

    global _LOGGING_INITIALISED

    if not _LOGGING_INITIALISED:
        log_dir = log_dir or _default_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        level = "DEBUG" if verbose else "INFO"
        pre_chain = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
        ]
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    # Console lines lead with the ISO timestamp
                    "console": {
                        "()": structlog.stdlib.ProcessorFormatter,
                        "processor": structlog.dev.ConsoleRenderer(colors=False),
                        "foreign_pre_chain": pre_chain,
                    },
                    "json": {
                        "()": "pythonjsonlogger.json.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                        "reserved_attrs": _RESERVED_ATTRS,
                    },
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "console",
                    },
                    "catalog_file": {
                        "class": "logging.FileHandler",
                        "level": "INFO",
                        "filename": str(log_dir / "catalog.log"),
                        "formatter": "json",
                        "encoding": "utf-8",
                    },
                    "error_file": {
                        "class": "logging.FileHandler",
                        "level": "ERROR",
                        "filename": str(log_dir / "error.log"),
                        "formatter": "json",
                        "encoding": "utf-8",
                    },
                },
                "loggers": {
                    "catalog_sniper": {
                        "handlers": ["console", "catalog_file", "error_file"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        structlog.configure(
            processors=[
                *pre_chain,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("catalog_sniper")


def log_file_path(log_dir: Path | None = None) -> Path:
    return (log_dir or _default_log_dir()) / "catalog.log"


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    """Return the last N lines from a log file."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        lines = stream.readlines()
    return lines[-line_count:]


__all__ = ["configure_logging", "log_file_path", "tail_log"]
