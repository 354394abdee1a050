# ============================================================================
# src/idp_extraction/utils/logging.py
# ============================================================================
"""
Logging configuration and utilities for the IDP extraction engine.

Console output (and an optional file) is configured once by the host from
LoggingSettings. Every handler carries a CredentialRedactionFilter: aiohttp
error messages embed the request URL, and the Gemini credential travels in
its `key` query parameter.
"""

import asyncio
import functools
import json
import logging
import re
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ('aiohttp.access', 'uvicorn.access')

_KEY_PARAM = re.compile(r'([?&]key=)[^&\s\'"]+')


def redact_credentials(message: str) -> str:
    """Mask `key=` query parameters in URLs."""
    return _KEY_PARAM.sub(r'\1***', message)


class CredentialRedactionFilter(logging.Filter):
    """Rewrites the rendered message so API keys never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_credentials(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_json: bool = False
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging
        format_json: Emit one JSON object per line instead of plain text
    """
    formatter = JsonFormatter() if format_json else logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    redaction = CredentialRedactionFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redaction)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """JSON log formatter (UTC timestamps, millisecond precision)."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_data = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_data['exception'] = redact_credentials(self.formatException(record.exc_info))

        return json.dumps(log_data)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_performance(logger: logging.Logger, operation: str):
    """
    Decorator logging how long `operation` took, or how long it ran before
    failing. Accepts plain functions and coroutine functions.
    """
    def report(started: float, error: Optional[BaseException] = None):
        elapsed = time.perf_counter() - started
        if error is None:
            logger.info(f"{operation} completed in {elapsed:.3f}s")
        else:
            logger.error(f"{operation} failed after {elapsed:.3f}s: {error}")

    def decorator(func):
        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    report(started, e)
                    raise
                report(started)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                report(started, e)
                raise
            report(started)
            return result

        return wrapper
    return decorator
