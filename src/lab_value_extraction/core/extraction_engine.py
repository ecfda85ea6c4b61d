# ============================================================================
# src/lab_value_extraction/core/extraction_engine.py
# ============================================================================
"""
Lab Value Extraction Engine

Turns OCR text blocks (one per scanned image) into a result map:
parameter name -> unique numeric strings.

Per block:
    for each line → normalize
        for each parameter (registration order) not saturated
            for each alias (declared order) scoring above threshold
                first number token that passes format + range is recorded

Blocks are processed independently: every process_block call owns its
result lists and its "found" set and only reads the shared registry, so
calls are safe from any number of threads or tasks. merge() is the single
place results are combined, after all blocks are done.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from ..config import extraction_settings
from ..matching.fuzzy_matcher import FuzzyMatcher
from ..utils.text_normalizer import normalize_line, split_lines
from ..validators.numeric_validator import NumericValidator, extract_numbers
from .registry import ParameterRegistry

logger = logging.getLogger(__name__)

ResultMap = Dict[str, List[str]]

FOUND_SCOPES = ("block", "line")


class ExtractionEngine:
    """
    Alias-matching lab value extractor.

    Policies (defaults from ExtractionSettings):
        max_values_per_parameter: per-block cap on recorded values
        found_scope: "block" keeps a parameter marked found for the rest of
            the block after it records a value; "line" clears the mark on
            every new line
        global_value_cap: optional cap applied after merge + dedup
    """

    def __init__(
        self,
        registry: Optional[ParameterRegistry] = None,
        matcher: Optional[FuzzyMatcher] = None,
        validator: Optional[NumericValidator] = None,
        max_values_per_parameter: Optional[int] = None,
        found_scope: Optional[str] = None,
        global_value_cap: Optional[int] = None,
    ):
        settings = extraction_settings

        self.registry = registry if registry is not None else ParameterRegistry.default()
        self.matcher = matcher or FuzzyMatcher(
            threshold=settings.MATCH_THRESHOLD,
            scorer=settings.SCORER,
        )
        self.validator = validator or NumericValidator(self.registry)

        self.max_values_per_parameter = (
            max_values_per_parameter
            if max_values_per_parameter is not None
            else settings.MAX_VALUES_PER_PARAMETER
        )
        self.found_scope = found_scope or settings.FOUND_SCOPE
        self.global_value_cap = (
            global_value_cap
            if global_value_cap is not None
            else settings.GLOBAL_VALUE_CAP
        )

        if self.max_values_per_parameter < 1:
            raise ValueError("max_values_per_parameter must be at least 1")
        if self.found_scope not in FOUND_SCOPES:
            raise ValueError(f"found_scope must be one of {FOUND_SCOPES}, got {self.found_scope!r}")
        if self.global_value_cap is not None and self.global_value_cap < 1:
            raise ValueError("global_value_cap must be at least 1")

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def empty_result(self) -> ResultMap:
        """One empty list per registered parameter, in registration order."""
        return {definition.name: [] for definition in self.registry.all_parameters()}

    def process_block(self, text: str) -> ResultMap:
        """
        Extract values from one OCR text block.

        Never raises: a block that cannot be processed yields an all-empty
        partial result.
        """
        try:
            return self._process_block(text)
        except Exception as e:
            logger.warning(f"Text block could not be processed, contributing no values: {e}", exc_info=True)
            return self.empty_result()

    def merge(self, partials: Iterable[ResultMap]) -> ResultMap:
        """
        Combine partial results in the given order.

        Values are concatenated per parameter, then deduplicated keeping the
        first occurrence. Keys not in the registry are ignored.
        """
        merged = self.empty_result()
        seen: Dict[str, Set[str]] = {name: set() for name in merged}

        for partial in partials:
            if not partial:
                continue
            for name, values in partial.items():
                if name not in merged:
                    logger.debug(f"Ignoring unregistered parameter in partial result: {name!r}")
                    continue
                for value in values:
                    if value in seen[name]:
                        continue
                    seen[name].add(value)
                    merged[name].append(value)

        if self.global_value_cap is not None:
            for name in merged:
                del merged[name][self.global_value_cap:]

        return merged

    def extract_from_blocks(self, texts: Union[str, Sequence[str]]) -> ResultMap:
        """
        Process every OCR text block and merge the results.

        Always returns one key per registered parameter, even for no input.
        """
        if isinstance(texts, str):
            texts = [texts]

        partials = [self.process_block(text) for text in texts]
        result = self.merge(partials)

        found = sum(1 for values in result.values() if values)
        logger.info(f"Extracted values for {found}/{len(result)} parameters from {len(partials)} text blocks")
        return result

    # ========================================================================
    # BLOCK PROCESSING
    # ========================================================================

    def _process_block(self, text: str) -> ResultMap:
        results = self.empty_result()
        if not isinstance(text, str):
            logger.debug(f"Skipping non-text block of type {type(text).__name__}")
            return results

        found: Set[str] = set()
        cap = self.max_values_per_parameter

        for line in split_lines(text):
            if self.found_scope == "line":
                found = set()

            normalized = normalize_line(line)
            if not normalized:
                continue

            for definition in self.registry.all_parameters():
                name = definition.name
                if len(results[name]) >= cap:
                    continue
                if name in found:
                    continue

                # First qualifying alias ends the alias search on this line,
                # even when no number validates.
                candidate = self.matcher.match(normalized, definition)
                if candidate is None:
                    continue

                value = self.validator.first_valid(name, extract_numbers(normalized))
                if value is not None:
                    results[name].append(value)
                    found.add(name)
                    logger.debug(
                        f"{name}: {value} (alias {candidate.alias!r}, score {candidate.score}) "
                        f"from line {normalized!r}"
                    )

        return results


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def extract_from_blocks(texts: Union[str, Sequence[str]], registry: Optional[ParameterRegistry] = None) -> ResultMap:
    """Run a default-configured engine over OCR text blocks."""
    return ExtractionEngine(registry=registry).extract_from_blocks(texts)
