# ============================================================================
# FILE: tests/unit/test_orchestrator.py
# ============================================================================
"""
Unit tests for the concurrent image → OCR → extraction orchestrator
"""

import asyncio

import pytest

from src.lab_value_extraction.core.orchestrator import LabReportOrchestrator, AnalysisResult
from src.lab_value_extraction.utils.exceptions import (
    ImageFetchError,
    ImageSourceError,
    NoImagesFoundError,
)


@pytest.mark.asyncio
async def test_analyze_merges_all_images(engine, fake_image_source, fake_ocr):
    """Test every image contributes and duplicates are merged"""
    source = fake_image_source({
        "http://docs/1.png": b"Creatinine 1.23 mg/dL\nHemoglobin 13.5",
        "http://docs/2.png": b"Hemoglobin 13.5\nK+ 4.1",
        "http://docs/3.png": b"Ferritin 250",
    })
    orchestrator = LabReportOrchestrator(source, fake_ocr(), engine, max_concurrent=2)

    result = await orchestrator.analyze("739")

    assert isinstance(result, AnalysisResult)
    assert result.subject_id == "739"
    assert result.images_total == 3
    assert result.images_failed == 0
    assert result.values["Creatinine"] == ["1.23"]
    assert result.values["Hemoglobin"] == ["13.5"]
    assert result.values["Potassium"] == ["4.1"]
    assert result.values["Ferritin"] == ["250"]
    assert sorted(source.fetched) == sorted(source.images)


@pytest.mark.asyncio
async def test_failed_image_does_not_cancel_others(engine, fake_image_source, fake_ocr):
    """Test fetch and OCR failures become empty partials"""
    source = fake_image_source({
        "http://docs/1.png": ImageFetchError("Image fetch failed", url="http://docs/1.png", status=500),
        "http://docs/2.png": b"unreadable",
        "http://docs/3.png": b"Iron 55",
    })
    orchestrator = LabReportOrchestrator(source, fake_ocr(fail_on={b"unreadable"}), engine)

    result = await orchestrator.analyze("739")

    assert result.images_total == 3
    assert result.images_failed == 2
    assert {f["url"] for f in result.failures} == {"http://docs/1.png", "http://docs/2.png"}
    assert result.values["Iron"] == ["55"]
    assert set(result.values) == set(engine.registry.names())


@pytest.mark.asyncio
async def test_all_images_failing_gives_empty_result(engine, fake_image_source, fake_ocr):
    """Test total failure still returns every key"""
    source = fake_image_source({"http://docs/1.png": RuntimeError("network down")})
    orchestrator = LabReportOrchestrator(source, fake_ocr(), engine)

    result = await orchestrator.analyze("739")

    assert result.images_failed == 1
    assert all(values == [] for values in result.values.values())


@pytest.mark.asyncio
async def test_no_images_is_an_error(engine, fake_image_source, fake_ocr):
    """Test a subject without images cannot be analyzed"""
    orchestrator = LabReportOrchestrator(fake_image_source({}), fake_ocr(), engine)

    with pytest.raises(NoImagesFoundError) as exc_info:
        await orchestrator.analyze("739")

    assert exc_info.value.subject_id == "739"


@pytest.mark.asyncio
async def test_listing_failure_propagates(engine, fake_image_source, fake_ocr):
    """Test failure to list images is surfaced to the caller"""
    source = fake_image_source({}, listing_error=ImageSourceError("HTTP 500"))
    orchestrator = LabReportOrchestrator(source, fake_ocr(), engine)

    with pytest.raises(ImageSourceError):
        await orchestrator.analyze("739")


@pytest.mark.asyncio
async def test_concurrency_is_bounded(engine, fake_ocr):
    """Test no more than max_concurrent images are in flight"""
    in_flight = 0
    peak = 0

    class SlowSource:
        async def list_images(self, subject_id):
            return [f"http://docs/{i}.png" for i in range(8)]

        async def fetch_image(self, url):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return b"Iron 55"

    orchestrator = LabReportOrchestrator(SlowSource(), fake_ocr(), engine, max_concurrent=3)

    result = await orchestrator.analyze("739")

    assert peak <= 3
    assert result.values["Iron"] == ["55"]


@pytest.mark.asyncio
async def test_analyze_texts(engine, fake_image_source, fake_ocr, sample_ocr_text):
    """Test engine-only path for already recognized text"""
    orchestrator = LabReportOrchestrator(fake_image_source({}), fake_ocr(), engine)

    result = await orchestrator.analyze_texts([sample_ocr_text])

    assert result.subject_id is None
    assert result.values["eGFR"] == ["58"]


def test_result_to_dict(engine):
    """Test serialisable envelope"""
    result = AnalysisResult(subject_id="739", values=engine.empty_result(), images_total=2, images_failed=1)
    data = result.to_dict()

    assert data["subject_id"] == "739"
    assert data["images_failed"] == 1
    assert set(data["data"]) == set(engine.registry.names())
