# ============================================================================
# src/lab_value_extraction/config/extraction_config.py
# ============================================================================
"""
Extraction Engine Settings
- Fuzzy match threshold and scorer
- Per-block value cap
- Found-mark scope
- Optional post-merge cap
- Optional parameter registry override
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ExtractionSettings(BaseSettings):
    MATCH_THRESHOLD: int = Field(
        default=80,
        ge=0, le=100,
        description="A line names a parameter when its alias score is strictly above this value"
    )
    SCORER: Literal["positional", "sequence"] = Field(
        default="positional",
        description="Similarity metric: naive positional overlap or difflib SequenceMatcher"
    )
    MAX_VALUES_PER_PARAMETER: int = Field(
        default=6,
        ge=1,
        description="Per-block cap on values recorded for one parameter"
    )
    GLOBAL_VALUE_CAP: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap applied after merge and dedup. None keeps every unique value."
    )
    FOUND_SCOPE: Literal["block", "line"] = Field(
        default="block",
        description="How long a parameter stays marked found after recording a value: rest of the block, or the current line only"
    )
    PARAMETER_REGISTRY_PATH: Optional[Path] = Field(
        default=None,
        description="JSON file replacing the built-in parameter table"
    )


extraction_settings = ExtractionSettings()
