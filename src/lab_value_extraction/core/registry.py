# ============================================================================
# src/lab_value_extraction/core/registry.py
# ============================================================================
"""
Parameter Registry

Static knowledge base of the lab parameters the engine looks for:
- Canonical name (unique key of the result map)
- Aliases, tried in declared order
- Optional numeric format (whole-token regex)
- Optional inclusive (min, max) range

Built once at process start and shared read-only by every extraction
call. Malformed entries are rejected at load time with ConfigurationError;
the engine never runs with a partially valid registry.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Pattern, Sequence, Tuple, Union

from ..constants import PARAMETER_ALIASES, PARAMETER_FORMATS, VALIDATION_RANGES
from ..utils.exceptions import ConfigurationError
from ..utils.text_normalizer import normalize_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterDefinition:
    name: str
    aliases: Tuple[str, ...]
    numeric_format: Optional[Pattern[str]] = None
    value_range: Optional[Tuple[float, float]] = None

    @property
    def format_pattern(self) -> Optional[str]:
        return self.numeric_format.pattern if self.numeric_format else None


class ParameterRegistry:
    """
    Immutable, ordered collection of ParameterDefinition.

    Iteration order is registration order; the engine relies on it for
    tie-breaks when several parameters match the same line.
    """

    def __init__(self, definitions: Sequence[ParameterDefinition]):
        by_name: Dict[str, ParameterDefinition] = {}
        for definition in definitions:
            _check_definition(definition)
            if definition.name in by_name:
                raise ConfigurationError(f"Duplicate parameter name: {definition.name!r}")
            by_name[definition.name] = definition

        self._definitions: Tuple[ParameterDefinition, ...] = tuple(by_name.values())
        self._by_name: Mapping[str, ParameterDefinition] = MappingProxyType(by_name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Optional[ParameterDefinition]:
        return self._by_name.get(name)

    def all_parameters(self) -> Tuple[ParameterDefinition, ...]:
        return self._definitions

    def names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ParameterDefinition]:
        return iter(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __repr__(self) -> str:
        return f"ParameterRegistry({list(self.names())!r})"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(
        cls,
        aliases: Mapping[str, Sequence[str]],
        ranges: Optional[Mapping[str, Sequence[float]]] = None,
        formats: Optional[Mapping[str, str]] = None,
    ) -> "ParameterRegistry":
        """
        Build from the three lookup tables (aliases, ranges, formats).

        The alias table defines which parameters exist and their order.
        Range and format entries must refer to a parameter in it.
        """
        ranges = ranges or {}
        formats = formats or {}

        for table_name, table in (("range", ranges), ("format", formats)):
            unknown = [name for name in table if name not in aliases]
            if unknown:
                raise ConfigurationError(
                    f"{table_name} given for unknown parameter(s): {', '.join(map(repr, unknown))}"
                )

        definitions = []
        for name, alias_list in aliases.items():
            definitions.append(_build_definition(
                name,
                alias_list,
                formats.get(name),
                ranges.get(name),
            ))

        registry = cls(definitions)
        logger.debug(f"Loaded parameter registry with {len(registry)} parameters")
        return registry

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "ParameterRegistry":
        """
        Load from a JSON file:

            {"parameters": [
                {"name": "Potassium", "aliases": ["Potassium", "K+"],
                 "format": "\\\\d+\\\\.\\\\d", "range": [2.5, 6.5]},
                ...
            ]}
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read parameter registry {path}: {e}") from e

        entries = data.get("parameters") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigurationError(f"{path}: expected an object with a 'parameters' list")

        definitions = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigurationError(f"{path}: parameter #{index} is not an object")
            definitions.append(_build_definition(
                entry.get("name"),
                entry.get("aliases"),
                entry.get("format"),
                entry.get("range"),
            ))

        registry = cls(definitions)
        logger.info(f"Loaded {len(registry)} parameters from {path}")
        return registry

    @classmethod
    def default(cls) -> "ParameterRegistry":
        """Registry built from the settings override file or the built-in table."""
        return _default_registry()


@lru_cache(maxsize=1)
def _default_registry() -> ParameterRegistry:
    from ..config import extraction_settings

    if extraction_settings.PARAMETER_REGISTRY_PATH:
        return ParameterRegistry.from_json(extraction_settings.PARAMETER_REGISTRY_PATH)
    return ParameterRegistry.from_mapping(PARAMETER_ALIASES, VALIDATION_RANGES, PARAMETER_FORMATS)


# ============================================================================
# LOAD-TIME VALIDATION
# ============================================================================

def _build_definition(name, aliases, numeric_format, value_range) -> ParameterDefinition:
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Parameter name must be a non-empty string, got {name!r}")

    if isinstance(aliases, str) or not isinstance(aliases, (list, tuple)):
        raise ConfigurationError(f"{name}: aliases must be a list of strings")

    pattern = None
    if numeric_format is not None:
        if isinstance(numeric_format, str):
            try:
                pattern = re.compile(numeric_format)
            except re.error as e:
                raise ConfigurationError(f"{name}: invalid format {numeric_format!r}: {e}") from e
        elif isinstance(numeric_format, re.Pattern):
            pattern = numeric_format
        else:
            raise ConfigurationError(f"{name}: format must be a regex string")

    bounds = None
    if value_range is not None:
        if isinstance(value_range, str) or not isinstance(value_range, (list, tuple)) or len(value_range) != 2:
            raise ConfigurationError(f"{name}: range must be a (min, max) pair, got {value_range!r}")
        try:
            bounds = (float(value_range[0]), float(value_range[1]))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{name}: range bounds must be numbers, got {value_range!r}") from e

    return ParameterDefinition(
        name=name,
        aliases=tuple(aliases),
        numeric_format=pattern,
        value_range=bounds,
    )


def _check_definition(definition: ParameterDefinition) -> None:
    name = definition.name
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Parameter name must be a non-empty string, got {name!r}")

    if not definition.aliases:
        raise ConfigurationError(f"{name}: alias list is empty")
    for alias in definition.aliases:
        if not isinstance(alias, str) or not alias.strip():
            raise ConfigurationError(f"{name}: blank alias {alias!r}")
        # Lines are normalized before matching; an alias made only of noise
        # characters would match every line.
        if not normalize_line(alias):
            raise ConfigurationError(f"{name}: alias {alias!r} has no letters or digits")

    if definition.value_range is not None:
        low, high = definition.value_range
        if math.isnan(low) or math.isnan(high):
            raise ConfigurationError(f"{name}: range bounds must not be NaN")
        if low > high:
            raise ConfigurationError(f"{name}: inverted range ({low}, {high})")
