"""
Structured JSON Logging Configuration for cancellation resolution

Provides consistent, parseable logging for development and production.
Logs can be viewed with jq, e.g. filter a single booking:

    jq 'select(.booking_id == "abc")' cancellation.log
"""
import json
import logging
import os
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Fields the orchestrator and gateway attach via extra={}
CONTEXT_FIELDS = [
    'request_id', 'booking_id', 'intent_id', 'strategy', 'result',
    'outcome', 'status_code', 'method', 'path', 'duration_ms', 'error_type',
]

_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'extra_data', 'getMessage',
}


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs logs as single-line JSON objects.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        # Anything else passed through extra={} that is JSON-friendly
        for attr_name, attr_value in record.__dict__.items():
            if attr_name not in _STANDARD_ATTRS and attr_name not in log_data:
                if isinstance(attr_value, (str, int, float, bool, type(None), dict, list)):
                    log_data[attr_name] = attr_value

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyJSONFormatter(logging.Formatter):
    """
    Colored single-line formatter for development.

    Same fields as JSONFormatter, rendered for a console.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime('%H:%M:%S.%f')[:-3]
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        parts = [
            f"{color}[{record.levelname}]{reset}",
            timestamp,
            f"{record.name}:",
            record.getMessage(),
        ]

        extra_parts = []
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                extra_parts.append(f"{field}={value}")
        if extra_parts:
            parts.append(f"({', '.join(extra_parts)})")

        result = ' '.join(parts)
        if record.exc_info:
            result += '\n' + self.formatException(record.exc_info)
        return result


def setup_logging(
    app_name: str = 'cancellation',
    log_level: str = 'INFO',
    log_format: str = 'json',
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure structured logging for the cancellation package.

    Module loggers (cancellation.*) inherit the handlers installed here.

    Args:
        app_name: Name of the application logger
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type ('json' or 'pretty')
        log_file: Optional file path for file-based logging

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging('cancellation', 'INFO', 'pretty')
        >>> logger.info('Store ready', extra={'strategy': 'file'})
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(app_name)
    logger.setLevel(numeric_level)
    logger.handlers = []

    if log_format == 'pretty':
        formatter: logging.Formatter = PrettyJSONFormatter()
    else:
        formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            # Always use JSON for file logs
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Failed to setup file logging: {e}")

    logger.propagate = False
    return logger


def setup_logging_from_config(cfg=None) -> logging.Logger:
    """Configure logging from CancellationConfig settings."""
    if cfg is None:
        from cancellation.config import config as cfg
    return setup_logging(
        app_name='cancellation',
        log_level=cfg.LOG_LEVEL,
        log_format=cfg.LOG_FORMAT,
        log_file=cfg.LOG_FILE,
    )


def generate_request_id() -> str:
    """
    Generate a short request ID for tracing one attempt.

    Returns:
        8-character unique identifier
    """
    return str(uuid.uuid4())[:8]


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    request_id: Optional[str] = None,
    **kwargs
) -> None:
    """
    Log with additional context fields.

    Example:
        >>> log_with_context(
        ...     logger, logging.INFO, "Strategy finished",
        ...     request_id="abc123", booking_id="b-1", strategy="direct"
        ... )
    """
    extra: Dict[str, Any] = {}
    if request_id:
        extra['request_id'] = request_id
    extra.update(kwargs)
    logger.log(level, message, extra=extra)
