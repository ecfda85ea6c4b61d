# src/lab_value_extraction/extractors/__init__.py
"""
Collaborators that feed the extraction engine:
- Image acquisition from a document server (aiohttp)
- OCR of each image (Tesseract)
"""

from .image_source import ImageSource, HttpImageSource, parse_image_urls
from .ocr_extractor import TesseractOCR, TextRecognizer

__all__ = [
    "ImageSource",
    "HttpImageSource",
    "parse_image_urls",
    "TesseractOCR",
    "TextRecognizer",
]
