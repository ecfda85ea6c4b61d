# ============================================================================
# src/lab_value_extraction/matching/fuzzy_matcher.py
# ============================================================================
"""
Fuzzy alias matching for OCR lines.

Decides whether a normalized line plausibly names a parameter by scoring
it against each alias (integer 0-100). Two scorers are available:

- positional: literal containment scores 100, otherwise count characters
  that agree position by position from index 0 over the shorter string.
  Early agreement scores high, any shift scores low.
- sequence: containment scores 100, otherwise difflib.SequenceMatcher ratio.

Both give 100 for identical strings and for containment regardless of
length, and 0 for equal-length strings with no positional agreement.

An alias that loses characters to normalization ("K+" -> "k") counts as
contained only when it stands as a whole word in the line, and is
otherwise scored as written.
"""

import logging
import math
import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Callable, Dict, Optional

from ..core.registry import ParameterDefinition
from ..utils.text_normalizer import normalize_line

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 80


@dataclass(frozen=True)
class MatchCandidate:
    parameter: str
    alias: str
    score: int


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _prepare(line: str, alias: str):
    return normalize_line(line).lower(), normalize_line(alias).lower()


def _contains(line: str, alias: str, norm_line: str, norm_alias: str) -> bool:
    if alias.lower() in line.lower():
        return True
    if norm_alias == alias.lower():
        return norm_alias in norm_line
    # Stripped alias ("K+" -> "k") must stand as a whole word: "k 4.1", not "kidney"
    return re.search(rf"\b{re.escape(norm_alias)}\b", norm_line) is not None


def _compared_alias(alias: str, norm_alias: str) -> str:
    # Aliases stripped by normalization are scored as written
    return norm_alias if norm_alias == alias.lower() else alias.lower()


def positional_ratio(line: str, alias: str) -> int:
    """Score alias against line: 100 on containment, else positional overlap."""
    norm_line, norm_alias = _prepare(line, alias)
    if _contains(line, alias, norm_line, norm_alias):
        return 100

    norm_alias = _compared_alias(alias, norm_alias)
    overlap = min(len(norm_line), len(norm_alias))
    if overlap == 0:
        return 0

    matches = sum(1 for a, b in zip(norm_line, norm_alias) if a == b)
    return _round_half_up(100 * matches / overlap)


def sequence_ratio(line: str, alias: str) -> int:
    """Score alias against line: 100 on containment, else SequenceMatcher ratio."""
    norm_line, norm_alias = _prepare(line, alias)
    if _contains(line, alias, norm_line, norm_alias):
        return 100

    norm_alias = _compared_alias(alias, norm_alias)
    if not norm_line or not norm_alias:
        return 0

    return _round_half_up(100 * SequenceMatcher(None, norm_line, norm_alias).ratio())


SCORERS: Dict[str, Callable[[str, str], int]] = {
    "positional": positional_ratio,
    "sequence": sequence_ratio,
}


class FuzzyMatcher:
    """
    Matches normalized lines to parameter aliases.

    A line qualifies for an alias when score > threshold (strict).
    """

    def __init__(self, threshold: int = DEFAULT_THRESHOLD, scorer: str = "positional"):
        if scorer not in SCORERS:
            raise ValueError(f"Unknown scorer {scorer!r}; expected one of {sorted(SCORERS)}")
        self.threshold = threshold
        self.scorer_name = scorer
        self._scorer = SCORERS[scorer]

    def score(self, line: str, alias: str) -> int:
        return self._scorer(line, alias)

    def qualifies(self, line: str, alias: str) -> bool:
        return self.score(line, alias) > self.threshold

    def match(self, line: str, parameter: ParameterDefinition) -> Optional[MatchCandidate]:
        """First alias (declared order) scoring above threshold, or None."""
        for alias in parameter.aliases:
            alias_score = self.score(line, alias)
            if alias_score > self.threshold:
                return MatchCandidate(parameter=parameter.name, alias=alias, score=alias_score)
        return None


def score(line: str, alias: str) -> int:
    """Positional score of alias against line (module-level convenience)."""
    return positional_ratio(line, alias)
