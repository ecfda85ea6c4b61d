# ============================================================================
# src/lab_value_extraction/config/ocr_config.py
# ============================================================================
"""
OCR Settings
- Tesseract language and page segmentation mode
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class OCRSettings(BaseSettings):
    OCR_LANGUAGE: str = Field(
        default="eng",
        description="Tesseract language pack"
    )
    OCR_PAGE_SEGMENTATION_MODE: int = Field(
        default=6,
        ge=0, le=13,
        description="Tesseract --psm; 6 treats the image as a single uniform block of text"
    )
    TESSERACT_CMD: Optional[str] = Field(
        default=None,
        description="Path to the tesseract binary when it is not on PATH"
    )


ocr_settings = OCRSettings()
