"""
Structured logging for the ingestion and aggregation pipeline.

Diagnostics (unparseable dates, skipped rows, dropped columns) are emitted
through a ``StructuredLogger`` that callers can inject into the decoder,
readers and aggregation services. Handlers are attached to the package
logger only, so a host application keeps control of the root logger.
"""

import logging
import sys
from typing import Any, Dict, Optional

from shopee_analytics.core.config import settings

PACKAGE_LOGGER = "shopee_analytics"

_RESERVED_ATTRS = frozenset(
    [
        "name", "msg", "args", "levelname", "levelno", "pathname",
        "filename", "module", "exc_info", "exc_text", "stack_info",
        "lineno", "funcName", "created", "msecs", "relativeCreated",
        "thread", "threadName", "processName", "process", "message",
        "taskName", "timestamp",
    ]
)

# marca os handlers instalados aqui, para reconfigurar sem duplicar
_OWNED_MARK = "_shopee_analytics_handler"


class StructuredLogger:
    """
    Wrapper over ``logging.Logger`` taking context as keyword arguments.

    ``bind`` returns a child carrying fixed context (e.g. the file being
    loaded) that is merged into every record it emits.
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context: Any) -> "StructuredLogger":
        return StructuredLogger(self.logger.name, {**self.context, **context})

    def _log(self, level: int, message: str, exc: Optional[BaseException] = None, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, message, exc_info=exc, extra={**self.context, **kwargs})

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc: Optional[BaseException] = None, **kwargs: Any) -> None:
        """Log an error; ``exc`` attaches its traceback to the record."""
        self._log(logging.ERROR, message, exc=exc, **kwargs)


class StructuredFormatter(logging.Formatter):
    """Render ``key=value`` context after the message."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "timestamp"):
            record.timestamp = self.formatTime(record, self.default_time_format)

        base_format = f"[{record.timestamp}] {record.levelname} {record.name}: {record.getMessage()}"

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        if extra_fields:
            base_format = f"{base_format} | {' | '.join(extra_fields)}"

        if record.exc_info:
            base_format = f"{base_format}\n{self.formatException(record.exc_info)}"
        return base_format


def _build_formatter(format_type: str) -> logging.Formatter:
    if format_type == "structured":
        return StructuredFormatter()
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def configure_logging(
    level: str = "INFO",
    format_type: str = "structured",
    enable_console: bool = True,
    enable_file: bool = False,
    log_file: Optional[str] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Attach console/file handlers to the package logger.

    Calling it again replaces the handlers installed by a previous call;
    handlers added by the host application are left alone.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ('structured' or 'simple')
        enable_console: Log to stdout
        enable_file: Log to ``log_file``
        log_file: Log file path (required if enable_file=True)
        logger_name: Logger to configure

    Returns:
        The configured logger
    """
    target = logging.getLogger(logger_name)
    for handler in [h for h in target.handlers if getattr(h, _OWNED_MARK, False)]:
        target.removeHandler(handler)
        handler.close()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    target.setLevel(numeric_level)
    formatter = _build_formatter(format_type)

    handlers: list[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if enable_file and log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_MARK, True)
        target.addHandler(handler)

    # openpyxl avisa sobre estilos ausentes em exports da Shopee
    logging.getLogger("openpyxl").setLevel(logging.WARNING)
    return target


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance for the given name."""
    return StructuredLogger(name)


def init_logging() -> logging.Logger:
    """Configure the package logger from settings."""
    target = configure_logging(
        level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        enable_console=settings.LOG_TO_CONSOLE,
        enable_file=settings.LOG_TO_FILE,
        log_file=settings.LOG_FILE_PATH,
    )
    get_logger(PACKAGE_LOGGER).info(
        "Logging initialized",
        level=settings.LOG_LEVEL,
        format_type=settings.LOG_FORMAT,
        log_file=settings.LOG_FILE_PATH if settings.LOG_TO_FILE else None,
    )
    return target
