# ============================================================================
# src/lab_value_extraction/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .extraction_config import ExtractionSettings, extraction_settings
from .ocr_config import OCRSettings, ocr_settings
from .source_config import SourceSettings, source_settings
from .logging_config import LoggingSettings, logging_settings
