"""Tests for the field registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from filterrules.exceptions import RegistryError
from filterrules.models import FieldDefinition, FieldType
from filterrules.registry import PROPERTY_FIELDS, FieldRegistry


def test_build_from_tuples_dicts_and_models() -> None:
    """Test the accepted field definition shapes."""
    registry = FieldRegistry(
        [
            ("price", FieldType.NUMBER),
            {"name": "status", "type": "string"},
            FieldDefinition(name="petsAllowed", type=FieldType.BOOLEAN),
        ]
    )
    assert registry.names() == ["price", "status", "petsAllowed"]
    assert registry.type_of("status") is FieldType.STRING
    assert registry.type_of("petsAllowed") is FieldType.BOOLEAN


def test_from_mapping_keeps_order() -> None:
    """Test building from a name-to-type mapping."""
    registry = FieldRegistry.from_mapping({"b": "number", "a": "boolean"})
    assert registry.names() == ["b", "a"]
    assert len(registry) == 2


def test_unknown_field_has_no_type() -> None:
    """Test lookups of unregistered names."""
    assert PROPERTY_FIELDS.type_of("garage") is None
    assert "garage" not in PROPERTY_FIELDS
    assert "price" in PROPERTY_FIELDS


def test_empty_registry() -> None:
    """Test that an empty registry is allowed."""
    registry = FieldRegistry()
    assert len(registry) == 0
    assert registry.definitions() == []


# =============================================================================
# Invalid definitions
# =============================================================================


def test_duplicate_names_rejected() -> None:
    """Test that a field name may appear only once."""
    with pytest.raises(RegistryError) as exc:
        FieldRegistry([("price", "number"), ("price", "string")])
    assert "Duplicate field name: 'price'" in str(exc.value)


@pytest.mark.parametrize(
    "spec",
    [
        ("price", "currency"),
        ("2price", "number"),
        ("has space", "number"),
        {"name": "price"},
        {"name": "price", "type": "number", "extra": 1},
        ("price",),
        42,
    ],
)
def test_invalid_definitions_rejected(spec: object) -> None:
    """Test that malformed definitions raise RegistryError."""
    with pytest.raises(RegistryError) as exc:
        FieldRegistry([spec])  # type: ignore[list-item]
    assert "Invalid field definition" in str(exc.value)


# =============================================================================
# JSON and file loading
# =============================================================================


def test_from_json_list() -> None:
    """Test loading a JSON array of definitions."""
    text = json.dumps([{"name": "rating", "type": "number"}, {"name": "title", "type": "string"}])
    registry = FieldRegistry.from_json(text)
    assert registry.names() == ["rating", "title"]


def test_from_json_object() -> None:
    """Test loading a JSON object mapping names to types."""
    registry = FieldRegistry.from_json('{"rating": "number", "active": "boolean"}')
    assert registry.type_of("active") is FieldType.BOOLEAN


@pytest.mark.parametrize("text", ["not json", '"price"', "42"])
def test_from_json_rejects_bad_documents(text: str) -> None:
    """Test that invalid or wrongly shaped JSON is rejected."""
    with pytest.raises(RegistryError):
        FieldRegistry.from_json(text)


def test_from_file(tmp_path: Path) -> None:
    """Test loading a registry from disk."""
    path = tmp_path / "fields.json"
    path.write_text('{"rating": "number"}', encoding="utf-8")
    assert FieldRegistry.from_file(path).names() == ["rating"]


def test_from_missing_file(tmp_path: Path) -> None:
    """Test that an unreadable file is a RegistryError."""
    with pytest.raises(RegistryError) as exc:
        FieldRegistry.from_file(tmp_path / "missing.json")
    assert "Failed to read" in str(exc.value)


# =============================================================================
# Value semantics
# =============================================================================


def test_equality_and_hash() -> None:
    """Test that registries with the same definitions are equal."""
    a = FieldRegistry.from_mapping({"price": "number"})
    b = FieldRegistry([("price", FieldType.NUMBER)])
    assert a == b
    assert hash(a) == hash(b)
    assert a != FieldRegistry.from_mapping({"price": "string"})


def test_registry_is_read_only() -> None:
    """Test that the registry cannot be modified after construction."""
    definitions = PROPERTY_FIELDS.definitions()
    definitions.clear()
    assert len(PROPERTY_FIELDS) == 31
    with pytest.raises(AttributeError):
        PROPERTY_FIELDS.extra = 1  # type: ignore[attr-defined]


def test_repr() -> None:
    """Test the debug representation."""
    assert repr(PROPERTY_FIELDS) == "FieldRegistry(31 fields)"


# =============================================================================
# Property schema
# =============================================================================


def test_property_fields_by_type() -> None:
    """Test the default property schema."""
    by_type: dict[FieldType, list[str]] = {}
    for definition in PROPERTY_FIELDS:
        by_type.setdefault(definition.type, []).append(definition.name)
    assert len(by_type[FieldType.NUMBER]) == 13
    assert len(by_type[FieldType.BOOLEAN]) == 8
    assert len(by_type[FieldType.STRING]) == 10
    assert "bodyCorpFees" in by_type[FieldType.NUMBER]
    assert "hasAircon" in by_type[FieldType.BOOLEAN]
    assert "postInspectionNotes" in by_type[FieldType.STRING]
