# ============================================================================
# src/lab_value_extraction/config/source_config.py
# ============================================================================
"""
Image Source Settings
- Document server location
- Request timeout
- Concurrency of per-image acquisition + OCR tasks
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class SourceSettings(BaseSettings):
    SOURCE_BASE_URL: str = Field(
        default="http://localhost:8080",
        description="Base URL of the document server; relative image URLs resolve against it"
    )
    SOURCE_PAGE_PATH: str = Field(
        default="/ci/paper/sign2/8/4/{subject_id}",
        description="Path template of the page listing a subject's report images"
    )
    REQUEST_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Total timeout in seconds for one HTTP request"
    )
    MAX_CONCURRENT_IMAGES: int = Field(
        default=4,
        ge=1,
        description="Maximum images fetched and OCR'd simultaneously"
    )


source_settings = SourceSettings()
