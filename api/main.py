# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Lab Value Extraction Engine

Runs on port 8000.
Every response uses the envelope {"success": bool, "data" | "error": ...}.
"""

import asyncio
import sys
import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lab_value_extraction.config import logging_settings
from lab_value_extraction.core import ExtractionEngine, LabReportOrchestrator
from lab_value_extraction.extractors import HttpImageSource, TesseractOCR
from lab_value_extraction.utils import (
    ImageSourceError,
    NoImagesFoundError,
    OCRError,
    setup_logging,
)

setup_logging(
    level=logging_settings.LOG_LEVEL,
    log_file=logging_settings.LOG_FILE,
    format_json=logging_settings.LOG_JSON,
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Lab Value Extraction API",
    description="Extracts validated lab values from OCR'd lab report images",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Models
# ============================================================================

class ExtractRequest(BaseModel):
    texts: List[str] = Field(..., description="OCR text blocks, one per image")


# ============================================================================
# Dependencies
# ============================================================================

_engine: ExtractionEngine = None


def get_engine() -> ExtractionEngine:
    global _engine
    if _engine is None:
        _engine = ExtractionEngine()
    return _engine


def get_ocr() -> TesseractOCR:
    return TesseractOCR()


async def get_orchestrator(
    engine: ExtractionEngine = Depends(get_engine),
    ocr: TesseractOCR = Depends(get_ocr),
):
    source = HttpImageSource()
    try:
        yield LabReportOrchestrator(source, ocr, engine)
    finally:
        await source.close()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/api/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy"}


@app.get("/api/parameters")
async def parameters(engine: ExtractionEngine = Depends(get_engine)):
    """Registered parameters with their aliases, formats and ranges."""
    return {
        "success": True,
        "data": [
            {
                "name": d.name,
                "aliases": list(d.aliases),
                "format": d.format_pattern,
                "range": list(d.value_range) if d.value_range else None,
            }
            for d in engine.registry.all_parameters()
        ],
    }


@app.post("/api/extract")
async def extract(request: ExtractRequest, engine: ExtractionEngine = Depends(get_engine)):
    """Extract lab values from already recognized text blocks."""
    if not request.texts:
        return _error(400, "No text blocks supplied")
    return {"success": True, "data": engine.extract_from_blocks(request.texts)}


@app.post("/api/extract-images")
async def extract_images(
    files: List[UploadFile] = File(...),
    engine: ExtractionEngine = Depends(get_engine),
    ocr: TesseractOCR = Depends(get_ocr),
):
    """OCR uploaded report images and extract lab values."""
    partials = []
    failures: List[Dict[str, Any]] = []
    for upload in files:
        content = await upload.read()
        try:
            text = await asyncio.to_thread(ocr.recognize_text, content)
        except OCRError as e:
            logger.warning(f"OCR failed for {upload.filename}: {e}")
            failures.append({"file": upload.filename, "error": str(e)})
            continue
        partials.append(engine.process_block(text))

    return {
        "success": True,
        "data": engine.merge(partials),
        "images_total": len(files),
        "images_failed": len(failures),
        "failures": failures,
    }


@app.post("/api/analyze/{subject_id}")
async def analyze(subject_id: str, orchestrator: LabReportOrchestrator = Depends(get_orchestrator)):
    """Fetch a subject's report images, OCR them and extract lab values."""
    try:
        result = await orchestrator.analyze(subject_id)
    except NoImagesFoundError as e:
        return _error(404, str(e))
    except ImageSourceError as e:
        logger.error(f"Image source failed for subject {subject_id}: {e}")
        return _error(502, str(e))

    return {"success": True, **result.to_dict()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
