"""
Logging Configuration
====================

Structured logging configuration with environment-specific settings.
Uses structlog for structured logging with JSON output in production.
"""

import logging
import logging.config
import sys
from typing import Dict, Any, TYPE_CHECKING
import structlog
from structlog.types import Processor

from .settings import get_settings

if TYPE_CHECKING:
    from .settings import Settings


def setup_logging() -> None:
    """Setup application logging configuration."""
    settings = get_settings()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(get_logging_config(settings))


def _rotating_file(settings: "Settings", filename: str, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "json",
        "filename": str(settings.log_dir / filename),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
    }


def get_logging_config(settings: "Settings") -> Dict[str, Any]:
    """
    Get the stdlib logging configuration that structlog renders into.

    Console output is the already-rendered structlog line, or JSON in
    production. Log files are always JSON and are not written while testing.
    """
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.log_level,
            "formatter": "json" if settings.environment == "production" else "rendered",
            "stream": sys.stdout,
        },
    }
    if settings.environment != "testing":
        handlers["file"] = _rotating_file(settings, "app.log", settings.log_level)
        handlers["error_file"] = _rotating_file(settings, "error.log", "ERROR")

    # Third-party loggers only reach the console
    library_loggers = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name, level in (("uvicorn", "INFO"), ("fastapi", "INFO"), ("playwright", "WARNING"))
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rendered": {"format": "%(message)s"},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {"level": settings.log_level, "handlers": list(handlers), "propagate": False},
            **library_loggers,
        },
    }


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def ensure_log_directories() -> None:
    """Ensure the log directory exists when file logging is enabled."""
    settings = get_settings()
    if settings.environment != "testing":
        settings.log_dir.mkdir(parents=True, exist_ok=True)


# Initialize logging on import
ensure_log_directories()
setup_logging()
