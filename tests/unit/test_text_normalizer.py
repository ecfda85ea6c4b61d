# ============================================================================
# FILE: tests/unit/test_text_normalizer.py
# ============================================================================
"""
Unit tests for OCR line normalization
"""

import pytest

from src.lab_value_extraction.utils.text_normalizer import normalize_line, split_lines


def test_strips_noise_characters():
    """Test that punctuation other than . and , is removed"""
    assert normalize_line("Creatinine | 1.23 | mg/dL") == "Creatinine  1.23  mgdL"


def test_keeps_period_comma_space():
    """Test that period, comma and space survive"""
    assert normalize_line("Protein, Urine 12.5") == "Protein, Urine 12.5"


def test_trims_whitespace():
    """Test leading/trailing whitespace (and noise turned edge) is trimmed"""
    assert normalize_line("  ~K+ 4.1~  ") == "K 4.1"


def test_removes_non_ascii_and_tabs():
    """Test non-ASCII glyphs and tabs are dropped"""
    assert normalize_line("Hémoglobin\t13.5 µg") == "Hmoglobin13.5 g"


def test_empty_line():
    """Test empty input"""
    assert normalize_line("") == ""


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "K+ 4.1",
    "  |eGFR| >60 mL/min/1.73m2 ",
    "Vitamin D, 25-OH: 31.2 ng/mL",
    " — noise — ",
])
def test_normalize_is_idempotent(text):
    """Test normalize(normalize(s)) == normalize(s)"""
    once = normalize_line(text)
    assert normalize_line(once) == once


def test_split_lines_handles_line_break_styles():
    """Test \\n, \\r\\n and \\r all split"""
    assert split_lines("a\nb\r\nc\rd") == ["a", "b", "c", "d"]


def test_split_lines_empty_block():
    """Test an empty block has no lines"""
    assert split_lines("") == []
