# ============================================================================
# src/lab_value_extraction/__init__.py
# ============================================================================
"""
Lab Value Extraction Engine

Extracts validated lab values (Creatinine, eGFR, Potassium, ...) from noisy
OCR text of scanned lab reports.

Usage:
    from lab_value_extraction import ExtractionEngine

    engine = ExtractionEngine()
    result = engine.extract_from_blocks(["Creatinine 1.23 mg/dL\\nK+ 4.1"])
    # {"Creatinine": ["1.23"], "eGFR": [], "Potassium": ["4.1"], ...}
"""

__version__ = "0.1.0"

from .core import (
    ParameterRegistry,
    ParameterDefinition,
    ExtractionEngine,
    ResultMap,
    extract_from_blocks,
    LabReportOrchestrator,
    AnalysisResult,
    render_rows,
    render_text,
)

__all__ = [
    'ParameterRegistry',
    'ParameterDefinition',
    'ExtractionEngine',
    'ResultMap',
    'extract_from_blocks',
    'LabReportOrchestrator',
    'AnalysisResult',
    'render_rows',
    'render_text',
]
