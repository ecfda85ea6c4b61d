# ============================================================================
# src/lab_value_extraction/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the lab value extraction engine.

Validation rejections and per-block soft failures are never raised to the
caller; only configuration and orchestration-level problems are.
"""


class LabExtractionError(Exception):
    """Base exception for all lab value extraction errors."""
    pass


class ConfigurationError(LabExtractionError):
    """Invalid configuration (malformed parameter registry entry, bad settings)."""
    pass


class ImageSourceError(LabExtractionError):
    """Error acquiring the report images for a subject."""
    pass


class ImageFetchError(ImageSourceError):
    """A single image could not be downloaded."""
    def __init__(self, message: str, url: str, status: int = None):
        super().__init__(message)
        self.url = url
        self.status = status


class NoImagesFoundError(ImageSourceError):
    """The source page for a subject lists no images; nothing to extract."""
    def __init__(self, message: str, subject_id: str):
        super().__init__(message)
        self.subject_id = subject_id


class OCRError(LabExtractionError):
    """Error turning an image into text."""
    pass
