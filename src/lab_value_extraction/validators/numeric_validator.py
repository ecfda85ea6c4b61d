# ============================================================================
# FILE: src/lab_value_extraction/validators/numeric_validator.py
# ============================================================================
"""
Numeric Candidate Extraction & Validation

Pulls number tokens out of a matched line and checks each one against the
parameter's registered format and range.

Example (Creatinine, format \\d+\\.\\d{2}, range 0.5-5.0):
- "1.23" → PASS
- "1.2"  → FAIL (format)
- "9.99" → FAIL (range)

Parameters without a format or range skip that check.
"""

import logging
import math
import re
from typing import Iterable, List, Optional

from ..core.registry import ParameterRegistry

logger = logging.getLogger(__name__)

# Decimal first so "1.23" is not split into "1" and "23"
NUMBER_PATTERN = re.compile(r"\b\d+\.\d+|\b\d+\b")


def extract_numbers(line: str) -> List[str]:
    """
    Number tokens in order of appearance, as raw substrings.

    Raw text is kept (not parsed) so the format check sees the source
    digits, e.g. "4.10" stays distinct from "4.1".
    """
    if not line:
        return []
    return NUMBER_PATTERN.findall(line)


class NumericValidator:
    """
    Check number tokens against a parameter's format and range.

    Never raises for bad input: unknown parameters and unparseable text
    are rejections.
    """

    def __init__(self, registry: Optional[ParameterRegistry] = None):
        self.registry = registry if registry is not None else ParameterRegistry.default()

    def validate(self, parameter: str, value_text: str) -> bool:
        definition = self.registry.lookup(parameter)
        if definition is None:
            logger.debug(f"{parameter}: not a registered parameter")
            return False

        if not isinstance(value_text, str):
            return False

        if definition.numeric_format is not None and not definition.numeric_format.fullmatch(value_text):
            logger.debug(f"{parameter}: {value_text!r} rejected by format {definition.format_pattern}")
            return False

        try:
            value = float(value_text)
        except ValueError:
            logger.debug(f"{parameter}: {value_text!r} is not a number")
            return False

        if math.isnan(value):
            return False

        if definition.value_range is not None:
            min_val, max_val = definition.value_range
            if value < min_val or value > max_val:
                logger.debug(f"{parameter}: {value_text} outside range [{min_val}, {max_val}]")
                return False

        return True

    def first_valid(self, parameter: str, candidates: Iterable[str]) -> Optional[str]:
        """First candidate (in order) that validates, or None."""
        for candidate in candidates:
            if self.validate(parameter, candidate):
                return candidate
        return None


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def validate_value(parameter: str, value_text: str, registry: Optional[ParameterRegistry] = None) -> bool:
    """
    Quick format + range check against the default registry.

    Returns:
        True if the value is accepted for the parameter
    """
    return NumericValidator(registry).validate(parameter, value_text)
