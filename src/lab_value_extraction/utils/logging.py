# ============================================================================
# src/lab_value_extraction/utils/logging.py
# ============================================================================
"""
Logging setup for the lab value extraction engine.

Records about a subject's report carry context fields (subject_id,
image_url) attached through LogAdapter. Both output formats show them:
the JSON formatter as keys, the text formatter as a trailing
"[subject=... image=...]" tag.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from functools import wraps
from pathlib import Path
from typing import Optional

# Record attribute -> short label used in text output
CONTEXT_FIELDS = {
    "subject_id": "subject",
    "image_url": "image",
}

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(context)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_json: bool = False
) -> None:
    """
    Configure the root logger for the API and CLI.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional file to log to besides stderr
        format_json: One JSON object per line instead of text
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    context_filter = ReportContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)


def report_context(record: logging.LogRecord) -> dict:
    """Context fields present on a record, in CONTEXT_FIELDS order."""
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class ReportContextFilter(logging.Filter):
    """Sets record.context to the text tag for the record's context fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = report_context(record)
        if context:
            tag = " ".join(f"{CONTEXT_FIELDS[k]}={v}" for k, v in context.items())
            record.context = f" [{tag}]"
        else:
            record.context = ""
        return True


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log_data.update(report_context(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def log_performance(logger: logging.Logger, operation: str):
    """
    Decorator timing a blocking call (OCR of one image).

    Logs the duration at DEBUG on success and at ERROR on failure; the
    exception is re-raised.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = datetime.now()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = (datetime.now() - start_time).total_seconds()
                logger.error(f"{operation} failed after {duration:.3f}s: {e}")
                raise
            duration = (datetime.now() - start_time).total_seconds()
            logger.debug(f"{operation} completed in {duration:.3f}s")
            return result

        return wrapper
    return decorator


class LogAdapter(logging.LoggerAdapter):
    """
    Attaches report context (subject_id, image_url) to every message.

    Per-call extra= values win over the adapter's own.
    """

    def process(self, msg, kwargs):
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs

    def for_image(self, image_url: str) -> "LogAdapter":
        """Same context plus the image being processed."""
        return LogAdapter(self.logger, {**self.extra, "image_url": image_url})
