# ============================================================================
# src/lab_value_extraction/utils/__init__.py
# ============================================================================
"""
Utility modules for the lab value extraction engine.
"""

from .exceptions import (
    LabExtractionError,
    ConfigurationError,
    ImageSourceError,
    ImageFetchError,
    NoImagesFoundError,
    OCRError,
)

from .logging import (
    setup_logging,
    log_performance,
    JsonFormatter,
    ReportContextFilter,
    LogAdapter,
)

from .text_normalizer import normalize_line, split_lines

__all__ = [
    # Exceptions
    'LabExtractionError',
    'ConfigurationError',
    'ImageSourceError',
    'ImageFetchError',
    'NoImagesFoundError',
    'OCRError',
    # Logging
    'setup_logging',
    'log_performance',
    'JsonFormatter',
    'ReportContextFilter',
    'LogAdapter',
    # Text
    'normalize_line',
    'split_lines',
]
