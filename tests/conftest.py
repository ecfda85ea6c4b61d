# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import pytest

from src.lab_value_extraction.core.registry import ParameterRegistry
from src.lab_value_extraction.core.extraction_engine import ExtractionEngine


@pytest.fixture
def default_registry():
    """Built-in renal panel registry"""
    return ParameterRegistry.default()


@pytest.fixture
def small_registry():
    """Creatinine, Potassium and Hemoglobin only"""
    return ParameterRegistry.from_mapping(
        {
            "Creatinine": ["Creatinine"],
            "Potassium": ["Potassium", "K+"],
            "Hemoglobin": ["Hemoglobin", "Hgb"],
        },
        ranges={
            "Creatinine": (0.5, 5.0),
            "Potassium": (2.5, 6.5),
            "Hemoglobin": (5, 20),
        },
        formats={
            "Creatinine": r"\d+\.\d{2}",
            "Potassium": r"\d+\.\d",
            "Hemoglobin": r"\d{2}\.\d",
        },
    )


@pytest.fixture
def engine(default_registry):
    """Engine with the built-in registry and default policies"""
    return ExtractionEngine(
        registry=default_registry,
        max_values_per_parameter=6,
        found_scope="block",
    )


@pytest.fixture
def sample_ocr_text():
    """Noisy OCR output of one scanned lab report page"""
    return (
        "LabCorp  Patient Report\n"
        "Creatinine | 1.23 | mg/dL  0.57-1.00\n"
        "eGFR   58   mL/min/1.73\n"
        "Potassium: 4.1 mmol/L\n"
        "Hemoglobin  13.5 g/dL\n"
    )


class FakeImageSource:
    """In-memory ImageSource: url -> bytes, or an exception to raise"""

    def __init__(self, images, listing_error=None):
        self.images = images
        self.listing_error = listing_error
        self.fetched = []

    async def list_images(self, subject_id):
        if self.listing_error:
            raise self.listing_error
        return list(self.images)

    async def fetch_image(self, url):
        self.fetched.append(url)
        image = self.images[url]
        if isinstance(image, Exception):
            raise image
        return image


class FakeOCR:
    """Recognizer that returns the image bytes decoded as text"""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on or set()

    def recognize_text(self, image_bytes):
        if image_bytes in self.fail_on:
            from src.lab_value_extraction.utils.exceptions import OCRError
            raise OCRError("unreadable image")
        return image_bytes.decode("utf-8")


@pytest.fixture
def fake_image_source():
    return FakeImageSource


@pytest.fixture
def fake_ocr():
    return FakeOCR
