#!/usr/bin/env python3
"""
Lab Value Extraction CLI

Extracts lab values from OCR text files and/or report images.

Usage:
    python scripts/extract_lab_values.py --text page1.txt page2.txt
    python scripts/extract_lab_values.py --image scan1.png scan2.jpg --json
    python scripts/extract_lab_values.py --image scan.png --registry params.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lab_value_extraction.core import ExtractionEngine, ParameterRegistry, render_text
from lab_value_extraction.utils import LabExtractionError, OCRError, setup_logging

logger = logging.getLogger("extract_lab_values")


def _read_texts(paths: List[Path]) -> List[str]:
    texts = []
    for path in paths:
        try:
            texts.append(path.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning(f"Skipping {path}: {e}")
    return texts


def _ocr_images(paths: List[Path]) -> List[str]:
    from lab_value_extraction.extractors import TesseractOCR

    ocr = TesseractOCR()
    texts = []
    for path in paths:
        try:
            texts.append(ocr.recognize_text(path.read_bytes()))
        except (OSError, OCRError) as e:
            logger.warning(f"Skipping {path}: {e}")
    return texts


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Extract lab values from OCR text or report images")
    parser.add_argument("--text", nargs="+", type=Path, default=[], help="OCR text files, one block per file")
    parser.add_argument("--image", nargs="+", type=Path, default=[], help="Report images to OCR")
    parser.add_argument("--registry", type=Path, help="JSON parameter registry replacing the built-in table")
    parser.add_argument("--json", action="store_true", help="Print the result map as JSON")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)

    if not args.text and not args.image:
        parser.error("give at least one --text or --image file")

    try:
        registry = ParameterRegistry.from_json(args.registry) if args.registry else None
        engine = ExtractionEngine(registry=registry)
    except LabExtractionError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    texts = _read_texts(args.text) + _ocr_images(args.image)
    result = engine.extract_from_blocks(texts)

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        print(render_text(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
