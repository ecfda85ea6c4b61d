# ============================================================================
# src/lab_value_extraction/core/__init__.py
# ============================================================================
"""
Core Module

Exports:
- ParameterRegistry / ParameterDefinition: parameter knowledge base
- ExtractionEngine: OCR text blocks → result map
- LabReportOrchestrator: concurrent image → OCR → extraction pipeline
- render_rows / render_text: presentation helpers
"""

# Registry first: the matcher and validator modules import it directly
from .registry import ParameterRegistry, ParameterDefinition
from .extraction_engine import ExtractionEngine, ResultMap, extract_from_blocks
from .orchestrator import LabReportOrchestrator, AnalysisResult
from .presentation import render_rows, render_text

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
