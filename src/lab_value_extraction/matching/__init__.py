# ============================================================================
# src/lab_value_extraction/matching/__init__.py
# ============================================================================
"""
Alias matching for OCR lines.
"""

from .fuzzy_matcher import (
    FuzzyMatcher,
    MatchCandidate,
    positional_ratio,
    sequence_ratio,
    score,
    SCORERS,
    DEFAULT_THRESHOLD,
)

__all__ = [
    'FuzzyMatcher',
    'MatchCandidate',
    'positional_ratio',
    'sequence_ratio',
    'score',
    'SCORERS',
    'DEFAULT_THRESHOLD',
]
