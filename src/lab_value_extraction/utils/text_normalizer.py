# ============================================================================
# src/lab_value_extraction/utils/text_normalizer.py
# ============================================================================
"""
Text Normalization Utilities

Cleans up OCR output before alias matching:
- Drops everything except ASCII letters, digits, period, comma and space
  (OCR noise such as |, :, ~, stray quotes and non-ASCII glyphs)
- Splits a recognized block into lines
"""

import re
from typing import List

_NOISE_PATTERN = re.compile(r"[^a-zA-Z0-9., ]")
_LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def normalize_line(line: str) -> str:
    """
    Strip non-alphanumeric noise from one line of OCR text.

    Keeps ASCII letters, digits, '.', ',' and ' ', then trims the ends.
    Idempotent: normalize_line(normalize_line(s)) == normalize_line(s).
    """
    if not line:
        return ""
    return _NOISE_PATTERN.sub("", line).strip()


def split_lines(text: str) -> List[str]:
    """Split a text block on line breaks. An empty block has no lines."""
    if not text:
        return []
    return _LINE_BREAK_PATTERN.split(text)
