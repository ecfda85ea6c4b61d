# ============================================================================
# src/lab_value_extraction/core/orchestrator.py
# ============================================================================
"""
Lab Report Orchestrator

Runs the whole pipeline for one subject:

    list images → per image, concurrently: fetch → OCR → process_block
                → join (failures become empty partials) → merge

Each image task owns its bytes, text and partial result. The only shared
object is the read-only parameter registry inside the engine, so no locks
are needed; merge runs once, after every task has finished.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..config import source_settings
from ..extractors.image_source import ImageSource
from ..extractors.ocr_extractor import TextRecognizer
from ..utils.exceptions import NoImagesFoundError
from ..utils.logging import LogAdapter
from .extraction_engine import ExtractionEngine, ResultMap


@dataclass
class AnalysisResult:
    subject_id: Optional[str]
    values: ResultMap
    images_total: int = 0
    images_failed: int = 0
    failures: List[Dict[str, str]] = field(default_factory=list)
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "data": self.values,
            "images_total": self.images_total,
            "images_failed": self.images_failed,
            "failures": self.failures,
            "processing_time": self.processing_time,
        }


class LabReportOrchestrator:
    """
    Concurrent acquisition + OCR + extraction for one subject's images.

    Args:
        image_source: Lists and downloads images
        ocr: Turns image bytes into text (blocking; run in a worker thread)
        engine: Extraction engine (default-configured if omitted)
        max_concurrent: Images in flight at once (default: from config)
    """

    def __init__(
        self,
        image_source: ImageSource,
        ocr: TextRecognizer,
        engine: Optional[ExtractionEngine] = None,
        max_concurrent: Optional[int] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.image_source = image_source
        self.ocr = ocr
        self.engine = engine or ExtractionEngine()
        self.max_concurrent = max_concurrent or source_settings.MAX_CONCURRENT_IMAGES

    async def analyze(self, subject_id: str) -> AnalysisResult:
        """
        Extract lab values from every report image of a subject.

        Raises:
            ImageSourceError: the image list cannot be fetched
            NoImagesFoundError: the subject has no images to analyze
        """
        log = LogAdapter(self.logger, {"subject_id": subject_id})
        start_time = datetime.now()

        urls = await self.image_source.list_images(subject_id)
        if not urls:
            raise NoImagesFoundError(f"No images found for subject {subject_id}", subject_id=subject_id)

        log.info(f"Analyzing {len(urls)} images (max concurrent: {self.max_concurrent})")

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def process_with_semaphore(url: str) -> ResultMap:
            async with semaphore:
                return await self._process_image(url, log.for_image(url))

        results = await asyncio.gather(
            *(process_with_semaphore(url) for url in urls),
            return_exceptions=True
        )

        partials: List[ResultMap] = []
        failures: List[Dict[str, str]] = []
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    # CancelledError / KeyboardInterrupt belong to the caller
                    raise result
                log.for_image(url).warning(f"Image failed, contributing no values: {result}")
                failures.append({"url": url, "error": str(result)})
                partials.append(self.engine.empty_result())
            else:
                partials.append(result)

        values = self.engine.merge(partials)
        processing_time = (datetime.now() - start_time).total_seconds()

        log.info(
            f"Analysis complete: {len(urls) - len(failures)} images succeeded, "
            f"{len(failures)} failed in {processing_time:.2f}s"
        )

        return AnalysisResult(
            subject_id=subject_id,
            values=values,
            images_total=len(urls),
            images_failed=len(failures),
            failures=failures,
            processing_time=processing_time,
        )

    async def analyze_texts(self, texts: Sequence[str]) -> AnalysisResult:
        """Run the engine over already recognized text blocks."""
        start_time = datetime.now()
        values = self.engine.extract_from_blocks(texts)
        return AnalysisResult(
            subject_id=None,
            values=values,
            images_total=len(texts),
            processing_time=(datetime.now() - start_time).total_seconds(),
        )

    async def _process_image(self, url: str, log: LogAdapter) -> ResultMap:
        image_bytes = await self.image_source.fetch_image(url)
        text = await asyncio.to_thread(self.ocr.recognize_text, image_bytes)
        partial = self.engine.process_block(text)
        log.debug(f"Values for {sum(1 for v in partial.values() if v)} parameters")
        return partial
