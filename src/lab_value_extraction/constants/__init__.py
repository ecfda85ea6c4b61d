# ============================================================================
# src/lab_value_extraction/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .lab_parameters import PARAMETER_ALIASES, VALIDATION_RANGES, PARAMETER_FORMATS
