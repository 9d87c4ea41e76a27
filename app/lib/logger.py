import logging
import os
from typing import Optional

# Map string log levels to logging constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRIBUTES = frozenset(
    {
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
        "message",
        "taskName",
    }
)


class StructuredFormatter(logging.Formatter):
    """Human-readable formatter that appends `extra` fields as key=value pairs."""

    def format(self, record):
        timestamp = self.formatTime(record, self.datefmt or "%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)
        logger_name = record.name.split(".")[-1][:20].ljust(20)
        message = record.getMessage()

        log_line = f"{timestamp} | {level} | {logger_name} | {message}"

        extras = []
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or value is None:
                continue
            extras.append(self._format_extra(key, value))

        extras = [extra for extra in extras if extra]
        if extras:
            log_line += f" | {' '.join(extras)}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line

    @staticmethod
    def _format_extra(key: str, value) -> str:
        if key == "event_type":
            return f"type={value}"
        if key == "txid" and isinstance(value, str) and len(value) > 16:
            return f"txid={value[:10]}..."
        if not isinstance(value, dict):
            return f"{key}={value}"

        # Request/response dicts come from the HTTP middleware
        if key == "request":
            method = value.get("method", "")
            path = value.get("path", "")
            return f"request={method} {path}" if method and path else ""
        if key == "response":
            parts = []
            if value.get("status_code"):
                parts.append(f"response={value['status_code']}")
            if value.get("process_time_ms"):
                parts.append(f"time={value['process_time_ms']}ms")
            return " ".join(parts)
        return f"{key}={str(value)[:100]}"


def configure_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger instance with consistent formatting and level.

    Args:
        name (Optional[str]): Logger name. If None, the module logger is returned

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name if name else __name__)

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = LOG_LEVELS.get(log_level_str, logging.INFO)
    logger.setLevel(log_level)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(StructuredFormatter())
        logger.addHandler(console_handler)

    return logger


def setup_uvicorn_logging() -> None:
    """Configure uvicorn loggers to use structured formatting."""
    # Access lines are produced by LoggingMiddleware instead
    logging.getLogger("uvicorn.access").disabled = True

    structured_formatter = StructuredFormatter()
    for logger_name in ["uvicorn", "uvicorn.error", "fastapi"]:
        for handler in logging.getLogger(logger_name).handlers:
            handler.setFormatter(structured_formatter)

    for handler in logging.getLogger().handlers:
        handler.setFormatter(structured_formatter)
