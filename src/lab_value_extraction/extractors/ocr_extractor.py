# src/lab_value_extraction/extractors/ocr_extractor.py
"""
OCR for scanned lab report images.

Turns raw image bytes into text with Tesseract (pytesseract + Pillow).
The engine treats the output as opaque, noisy text; nothing here tries to
clean it up.
"""

from io import BytesIO
from typing import Optional, Protocol
import logging
import shutil

import pytesseract
from PIL import Image, UnidentifiedImageError

from ..config import ocr_settings
from ..utils.exceptions import OCRError
from ..utils.logging import log_performance

logger = logging.getLogger(__name__)


class TextRecognizer(Protocol):
    """Anything that can turn image bytes into text."""

    def recognize_text(self, image_bytes: bytes) -> str:
        ...


class TesseractOCR:
    """
    Tesseract OCR for one image at a time.

    Page segmentation mode 6 (single uniform block of text) suits the
    tabular layout of lab report scans.
    """

    def __init__(
        self,
        lang: Optional[str] = None,
        page_segmentation_mode: Optional[int] = None,
        tesseract_cmd: Optional[str] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.lang = lang or ocr_settings.OCR_LANGUAGE
        self.page_segmentation_mode = (
            page_segmentation_mode
            if page_segmentation_mode is not None
            else ocr_settings.OCR_PAGE_SEGMENTATION_MODE
        )

        cmd = tesseract_cmd or ocr_settings.TESSERACT_CMD
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd

        self._tesseract_available: Optional[bool] = None

    @property
    def tesseract_available(self) -> bool:
        """Check if Tesseract is installed."""
        if self._tesseract_available is None:
            cmd = pytesseract.pytesseract.tesseract_cmd
            self._tesseract_available = shutil.which(cmd) is not None
            if not self._tesseract_available:
                self.logger.warning(f"Tesseract binary {cmd!r} not found on PATH")
        return self._tesseract_available

    @property
    def config(self) -> str:
        return f"--psm {self.page_segmentation_mode}"

    @log_performance(logger, "Tesseract OCR")
    def recognize_text(self, image_bytes: bytes) -> str:
        """
        OCR one image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, TIFF, ...)

        Returns:
            Recognized text with line breaks preserved

        Raises:
            OCRError: image cannot be decoded or Tesseract fails
        """
        if not image_bytes:
            raise OCRError("Empty image")

        try:
            image = Image.open(BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise OCRError(f"Cannot decode image: {e}") from e

        # Tesseract handles RGB/L; palette and RGBA scans need converting
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        try:
            text = pytesseract.image_to_string(image, lang=self.lang, config=self.config)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            raise OCRError(f"Tesseract failed: {e}") from e

        self.logger.debug(f"OCR produced {len(text)} characters ({image.width}x{image.height} image)")
        return text
