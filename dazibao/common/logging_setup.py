"""
Structured Logging Setup

One stderr logger per service, named "dazibao.<service>". Plain text by
default; JSON lines (one object per record, extras included) when
DAZIBAO_LOG_FORMAT=json or log_format: json is set.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message", "asctime", "service", "taskName",
}

# Every logger handed out by setup_logging, so levels can be retuned later
_service_loggers: dict[str, logging.Logger] = {}


class JsonFormatter(logging.Formatter):
    """Formats each record as a single JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service", "unknown"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """Stamps the service name on every record"""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**kwargs.get("extra", {}), "service": self.extra["service"]}
        return msg, kwargs


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for a service.

    Args:
        service_name: Name of the service (e.g., "polling", "web")
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format instead of plain text

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(f"dazibao.{service_name}")
    logger.setLevel(numeric_level)

    # Clear existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(_build_formatter(json_format))
    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    _service_loggers[service_name] = logger
    return logger


def get_service_logger(service_name: str) -> ServiceLoggerAdapter:
    """
    Get a logger adapter with service context.

    Args:
        service_name: Name of the service

    Returns:
        Logger adapter with service name in all logs
    """
    # Check for environment variable override
    log_level = os.environ.get("DAZIBAO_LOG_LEVEL", "INFO")
    json_format = os.environ.get("DAZIBAO_LOG_FORMAT", "text").lower() == "json"

    logger = setup_logging(service_name, log_level, json_format)
    return ServiceLoggerAdapter(logger, {"service": service_name})


def configure_service_loggers(log_level: str, json_format: bool | None = None) -> None:
    """
    Retune every service logger created so far.

    Used once settings are known (settings.yaml, --verbose), since service
    loggers are created at import time from environment defaults.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    for logger in _service_loggers.values():
        logger.setLevel(numeric_level)
        for handler in logger.handlers:
            handler.setLevel(numeric_level)
            if json_format is not None:
                handler.setFormatter(_build_formatter(json_format))


def log_command_failure(
    logger: logging.LoggerAdapter,
    block_title: str,
    command: str,
    error: Exception,
    label: str | None = None,
) -> None:
    """Log a failed command execution within a block tick"""
    if label is None:
        message = f"Error executing command for block '{block_title}' (command: {command}): {error}"
    else:
        message = f"Error executing command '{label}' in group '{block_title}': {error}"

    logger.warning(
        message,
        extra={"block": block_title, "command": command, "label": label},
    )
