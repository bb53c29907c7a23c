"""
Field registry: the closed set of fields an expression may reference.

A registry is built once by the host application and is read-only afterwards. Fields
that are not listed are unknown and always rejected by the type checker.

Example:
    registry = FieldRegistry.from_mapping({"price": "number", "petsAllowed": "boolean"})
    registry.type_of("price")  # FieldType.NUMBER
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

from pydantic import ValidationError

from .exceptions import RegistryError
from .models import FieldDefinition, FieldType

logger = logging.getLogger(__name__)

FieldSpec = Union[FieldDefinition, Mapping[str, Any], tuple[str, Union[FieldType, str]]]


def _coerce_definition(spec: FieldSpec) -> FieldDefinition:
    if isinstance(spec, FieldDefinition):
        return spec
    try:
        if isinstance(spec, Mapping):
            return FieldDefinition.model_validate(dict(spec))
        name, field_type = spec
        return FieldDefinition(name=name, type=field_type)
    except ValidationError as e:
        errors = e.errors()
        err = errors[0]
        loc = ".".join(str(part) for part in err["loc"])
        raise RegistryError(f"Invalid field definition {spec!r}: {loc}: {err['msg']}") from None
    except (TypeError, ValueError):
        raise RegistryError(
            f"Invalid field definition {spec!r}: expected {{name, type}} or (name, type)"
        ) from None


class FieldRegistry:
    """Immutable mapping of field name to semantic type, in declaration order."""

    __slots__ = ("_definitions", "_types")

    def __init__(self, fields: Iterable[FieldSpec] = ()) -> None:
        definitions: list[FieldDefinition] = []
        types: dict[str, FieldType] = {}
        for spec in fields:
            definition = _coerce_definition(spec)
            if definition.name in types:
                raise RegistryError(f"Duplicate field name: '{definition.name}'")
            types[definition.name] = definition.type
            definitions.append(definition)
        self._definitions = tuple(definitions)
        self._types = MappingProxyType(types)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, FieldType | str]) -> FieldRegistry:
        return cls((name, field_type) for name, field_type in mapping.items())

    @classmethod
    def from_json(cls, text: str) -> FieldRegistry:
        """
        Build a registry from JSON.

        Accepts either a list of `{"name": ..., "type": ...}` objects or a single
        object mapping field names to types.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RegistryError(f"Invalid JSON in field registry: {e}") from None

        if isinstance(data, dict):
            registry = cls.from_mapping(data)
        elif isinstance(data, list):
            registry = cls(data)
        else:
            raise RegistryError("Field registry must be a JSON array or object")
        logger.debug("Loaded field registry with %d fields", len(registry))
        return registry

    @classmethod
    def from_file(cls, path: str | Path) -> FieldRegistry:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise RegistryError(f"Failed to read field registry file: {e}") from None
        return cls.from_json(content)

    def type_of(self, name: str) -> FieldType | None:
        """Return the field's type, or None when the field is not registered."""
        return self._types.get(name)

    def definitions(self) -> list[FieldDefinition]:
        return list(self._definitions)

    def names(self) -> list[str]:
        return [d.name for d in self._definitions]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldRegistry):
            return NotImplemented
        return self._definitions == other._definitions

    def __hash__(self) -> int:
        return hash(self._definitions)

    def __repr__(self) -> str:
        return f"FieldRegistry({len(self)} fields)"


# Filterable fields of a property listing record.
PROPERTY_FIELDS = FieldRegistry(
    [
        ("price", FieldType.NUMBER),
        ("bedrooms", FieldType.NUMBER),
        ("bathrooms", FieldType.NUMBER),
        ("squareMetres", FieldType.NUMBER),
        ("ageYears", FieldType.NUMBER),
        ("previousPrice", FieldType.NUMBER),
        ("carParkCost", FieldType.NUMBER),
        ("bodyCorpFees", FieldType.NUMBER),
        ("councilRates", FieldType.NUMBER),
        ("estimatedRent", FieldType.NUMBER),
        ("desksFit", FieldType.NUMBER),
        ("floorLevel", FieldType.NUMBER),
        ("overallImpression", FieldType.NUMBER),
        ("carParkIncluded", FieldType.BOOLEAN),
        ("petsAllowed", FieldType.BOOLEAN),
        ("storageIncluded", FieldType.BOOLEAN),
        ("hasLaundrySpace", FieldType.BOOLEAN),
        ("goodLighting", FieldType.BOOLEAN),
        ("hasDishwasher", FieldType.BOOLEAN),
        ("isQuiet", FieldType.BOOLEAN),
        ("hasAircon", FieldType.BOOLEAN),
        ("address", FieldType.STRING),
        ("status", FieldType.STRING),
        ("propertyType", FieldType.STRING),
        ("aspect", FieldType.STRING),
        ("stoveType", FieldType.STRING),
        ("agentName", FieldType.STRING),
        ("websiteUrl", FieldType.STRING),
        ("notes", FieldType.STRING),
        ("visibleIssues", FieldType.STRING),
        ("postInspectionNotes", FieldType.STRING),
    ]
)
