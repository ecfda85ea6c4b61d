# ============================================================================
# FILE: src/lab_value_extraction/validators/__init__.py
# ============================================================================
"""
Validators Package

Format and range checks for number tokens found on matched lines.
"""

from .numeric_validator import (
    NumericValidator,
    extract_numbers,
    validate_value,
    NUMBER_PATTERN,
)

__all__ = [
    'NumericValidator',
    'extract_numbers',
    'validate_value',
    'NUMBER_PATTERN',
]
