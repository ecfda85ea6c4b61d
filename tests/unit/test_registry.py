# ============================================================================
# FILE: tests/unit/test_registry.py
# ============================================================================
"""
Unit tests for the parameter registry
"""

import json

import pytest

from src.lab_value_extraction.core.registry import ParameterRegistry, ParameterDefinition
from src.lab_value_extraction.constants import PARAMETER_ALIASES
from src.lab_value_extraction.utils.exceptions import ConfigurationError


def test_default_registry_contents(default_registry):
    """Test built-in table loads every parameter in declared order"""
    assert default_registry.names() == tuple(PARAMETER_ALIASES)
    assert len(default_registry) == 13


def test_default_registry_is_built_once():
    """Test default() returns the same shared instance"""
    assert ParameterRegistry.default() is ParameterRegistry.default()


def test_lookup(default_registry):
    """Test lookup of known and unknown names"""
    potassium = default_registry.lookup("Potassium")
    assert isinstance(potassium, ParameterDefinition)
    assert potassium.aliases == ("Potassium", "K+")
    assert potassium.value_range == (2.5, 6.5)
    assert potassium.format_pattern == r"\d+\.\d"

    assert default_registry.lookup("Sodium") is None
    assert "Potassium" in default_registry
    assert "Sodium" not in default_registry


def test_optional_format_and_range(default_registry):
    """Test parameters without format/range carry None"""
    albumin = default_registry.lookup("Urine Albumin")
    assert albumin.numeric_format is None
    assert albumin.value_range is None

    ferritin = default_registry.lookup("Ferritin")
    assert ferritin.numeric_format is None
    assert ferritin.value_range == (10.0, 1000.0)


def test_definitions_are_immutable(default_registry):
    """Test definitions cannot be changed after load"""
    definition = default_registry.lookup("Iron")
    with pytest.raises(AttributeError):
        definition.name = "Copper"


def test_empty_alias_list_rejected():
    """Test empty alias list fails at load time"""
    with pytest.raises(ConfigurationError, match="alias list is empty"):
        ParameterRegistry.from_mapping({"Iron": []})


def test_noise_only_alias_rejected():
    """Test an alias with no letters or digits fails at load time"""
    with pytest.raises(ConfigurationError):
        ParameterRegistry.from_mapping({"Iron": ["+"]})


def test_inverted_range_rejected():
    """Test min > max fails at load time"""
    with pytest.raises(ConfigurationError, match="inverted range"):
        ParameterRegistry.from_mapping({"Iron": ["Iron"]}, ranges={"Iron": (300, 10)})


def test_bad_range_shape_rejected():
    """Test a range that is not a pair fails at load time"""
    with pytest.raises(ConfigurationError):
        ParameterRegistry.from_mapping({"Iron": ["Iron"]}, ranges={"Iron": (10,)})


def test_bad_format_rejected():
    """Test an uncompilable format fails at load time"""
    with pytest.raises(ConfigurationError, match="invalid format"):
        ParameterRegistry.from_mapping({"Iron": ["Iron"]}, formats={"Iron": r"\d+("})


def test_range_for_unknown_parameter_rejected():
    """Test range table entries must name a registered parameter"""
    with pytest.raises(ConfigurationError, match="unknown parameter"):
        ParameterRegistry.from_mapping({"Iron": ["Iron"]}, ranges={"Copper": (1, 2)})


def test_duplicate_name_rejected():
    """Test duplicate names fail at load time"""
    definition = ParameterDefinition(name="Iron", aliases=("Iron",))
    with pytest.raises(ConfigurationError, match="Duplicate"):
        ParameterRegistry([definition, definition])


def test_from_json(tmp_path):
    """Test loading a registry from JSON keeps order and values"""
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        "parameters": [
            {"name": "Sodium", "aliases": ["Sodium", "Na"], "format": r"\d{3}", "range": [120, 160]},
            {"name": "Glucose", "aliases": ["Glucose"]},
        ]
    }))

    registry = ParameterRegistry.from_json(path)

    assert registry.names() == ("Sodium", "Glucose")
    assert registry.lookup("Sodium").value_range == (120.0, 160.0)
    assert registry.lookup("Glucose").numeric_format is None


def test_from_json_missing_file(tmp_path):
    """Test unreadable registry file is a configuration error"""
    with pytest.raises(ConfigurationError):
        ParameterRegistry.from_json(tmp_path / "missing.json")


def test_from_json_bad_entry(tmp_path):
    """Test malformed entry in JSON is rejected"""
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"parameters": [{"name": "Sodium", "aliases": "Sodium"}]}))

    with pytest.raises(ConfigurationError, match="aliases must be a list"):
        ParameterRegistry.from_json(path)
