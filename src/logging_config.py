"""Logging configuration for the PurpleAir ingest pipeline.

Provides structured logging with configurable levels, JSON formatting for
production, human-readable formatting for development, and an optional
rotating log file.
"""

import copy
import logging
import logging.config
from pathlib import Path
from typing import Optional

# Default logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "detailed": {
            "format": "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "format": "%(asctime)s %(name)s %(levelname)s %(lineno)d %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%SZ",
            "class": "pythonjsonlogger.jsonlogger.JsonFormatter",
        },
        "simple": {
            "format": "%(levelname)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "stream": "ext://sys.stdout",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filename": "logs/purpleair.log",
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
        },
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
    "loggers": {
        "purpleair": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "loaders": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "urllib3": {
            "level": "WARNING",
        },
    },
}

_APP_LOGGERS = ("purpleair", "loaders")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path; when set, output goes to a rotating
            file instead of stdout
        json_format: Use JSON formatting for structured logging
        verbose: Enable verbose output (DEBUG level)
    """
    config = copy.deepcopy(LOGGING_CONFIG)

    if verbose:
        level = "DEBUG"
    level = level.upper()

    config["root"]["level"] = level
    for name in _APP_LOGGERS:
        config["loggers"][name]["level"] = level

    formatter = "json" if json_format else "detailed"
    config["handlers"]["console"]["formatter"] = formatter
    config["handlers"]["file"]["formatter"] = formatter

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"]["filename"] = str(log_path)
        # Log file replaces the standard streams
        config["handlers"].pop("console")
        config["root"]["handlers"] = ["file"]
        for name in _APP_LOGGERS:
            config["loggers"][name]["handlers"] = ["file"]
    else:
        config["handlers"].pop("file", None)

    logging.config.dictConfig(config)

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging configured: level=%s, json_format=%s, log_file=%s", level, json_format, log_file
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def run_logger(run_id: str, sensor_id, name: str = "purpleair.pipeline") -> logging.LoggerAdapter:
    """Return a logger adapter scoped to one reading cycle.

    The adapter stamps `run_id` and `sensor_id` onto every record so that
    components handed this adapter log with the cycle's context.
    """
    return logging.LoggerAdapter(get_logger(name), {"run_id": run_id, "sensor_id": sensor_id})


# Convenience functions for common logging patterns
def log_pipeline_start(pipeline_name: str, **context) -> None:
    """Log the start of a pipeline execution."""
    logger = get_logger("purpleair.pipeline")
    logger.info(f"Starting pipeline: {pipeline_name}", extra=context)


def log_pipeline_end(pipeline_name: str, success: bool = True, **context) -> None:
    """Log the end of a pipeline execution."""
    logger = get_logger("purpleair.pipeline")
    status = "completed successfully" if success else "failed"
    logger.info(f"Pipeline {pipeline_name} {status}", extra=context)


def log_api_call(endpoint: str, method: str = "GET", **context) -> None:
    """Log API call details."""
    logger = get_logger("purpleair.api")
    logger.debug(f"API call: {method} {endpoint}", extra=context)


def log_error_with_context(error: Exception, operation: str, **context) -> None:
    """Log errors with additional context."""
    logger = get_logger("purpleair.errors")
    logger.error(f"Error in {operation}: {error}", extra=context, exc_info=error)
