"""
Mapper configuration validation against JSON Schema.

Configurations are plain dicts, e.g. as loaded from a JSON file or
produced by :meth:`MapperRegistry.export`.  The mapper type is taken
from an explicit ``"type"`` key when present and otherwise inferred
from the type-specific keys.  Structural checks use ``jsonschema``;
semantic checks (distinct reference points, conservation of each
configured judgment) are delegated to the mapper classes themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import jsonschema

from opentrust.errors import ValidationError
from opentrust.mapper.boolean import BooleanMapper
from opentrust.mapper.categorical import CategoricalMapper
from opentrust.mapper.numerical import NumericalMapper
from opentrust.mapper.types import (
    BooleanParams,
    CategoricalParams,
    Mapper,
    MapperType,
    NumericalParams,
)

_VERSION_PATTERN = r"^\d+\.\d+\.\d+$"

_JUDGMENT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["T", "I", "F"],
    "properties": {
        "T": {"type": "number", "minimum": 0, "maximum": 1},
        "I": {"type": "number", "minimum": 0, "maximum": 1},
        "F": {"type": "number", "minimum": 0, "maximum": 1},
    },
    "additionalProperties": False,
}


def _base_properties(mapper_type: MapperType) -> dict[str, Any]:
    return {
        "type": {"const": mapper_type.value},
        "id": {"type": "string", "minLength": 1},
        "version": {"type": "string", "pattern": _VERSION_PATTERN},
        "description": {"type": "string"},
        "metadata": {"type": "object"},
    }


MAPPER_SCHEMAS: dict[MapperType, dict[str, Any]] = {
    MapperType.NUMERICAL: {
        "type": "object",
        "required": ["id", "version", "falsity_point", "indeterminacy_point", "truth_point"],
        "properties": {
            **_base_properties(MapperType.NUMERICAL),
            "falsity_point": {"type": "number"},
            "indeterminacy_point": {"type": "number"},
            "truth_point": {"type": "number"},
            "clamp_to_range": {"type": "boolean"},
        },
        "additionalProperties": False,
    },
    MapperType.CATEGORICAL: {
        "type": "object",
        "required": ["id", "version", "mappings"],
        "properties": {
            **_base_properties(MapperType.CATEGORICAL),
            "mappings": {
                "type": "object",
                "patternProperties": {"^.+$": _JUDGMENT_SCHEMA},
                "additionalProperties": False,
            },
            "default_judgment": _JUDGMENT_SCHEMA,
        },
        "additionalProperties": False,
    },
    MapperType.BOOLEAN: {
        "type": "object",
        "required": ["id", "version", "true_map", "false_map"],
        "properties": {
            **_base_properties(MapperType.BOOLEAN),
            "true_map": _JUDGMENT_SCHEMA,
            "false_map": _JUDGMENT_SCHEMA,
        },
        "additionalProperties": False,
    },
}


class MapperValidator:
    """Validate mapper configuration dicts and build mappers from them."""

    def schema_for(self, mapper_type: MapperType | str) -> dict[str, Any]:
        try:
            return MAPPER_SCHEMAS[MapperType(mapper_type)]
        except (KeyError, ValueError) as exc:
            raise ValidationError(
                f"No schema defined for mapper type: {mapper_type}"
            ) from exc

    def detect_type(self, config: Mapping[str, Any]) -> MapperType:
        if "type" in config:
            try:
                return MapperType(config["type"])
            except ValueError as exc:
                raise ValidationError(f"Unknown mapper type: {config['type']!r}") from exc
        if all(k in config for k in ("falsity_point", "indeterminacy_point", "truth_point")):
            return MapperType.NUMERICAL
        if "mappings" in config:
            return MapperType.CATEGORICAL
        if "true_map" in config and "false_map" in config:
            return MapperType.BOOLEAN
        raise ValidationError("Cannot determine mapper type from configuration")

    def validate(self, config: Any) -> bool:
        """Validate *config*; return True or raise ValidationError."""
        self.create_mapper(config)
        return True

    def create_mapper(self, config: Any) -> Mapper:
        """Validate *config* and build the matching mapper."""
        if not isinstance(config, Mapping):
            raise ValidationError("Mapper configuration must be an object")

        mapper_type = self.detect_type(config)
        schema = self.schema_for(mapper_type)
        errors = sorted(
            jsonschema.Draft7Validator(schema).iter_errors(dict(config)),
            key=lambda e: list(e.path),
        )
        if errors:
            messages = [
                f"{'.'.join(str(p) for p in e.path) or '<root>'}: {e.message}"
                for e in errors
            ]
            raise ValidationError(f"Schema validation failed: {', '.join(messages)}")

        fields = {k: v for k, v in config.items() if k != "type"}
        if mapper_type is MapperType.NUMERICAL:
            return NumericalMapper(NumericalParams(**fields))
        if mapper_type is MapperType.CATEGORICAL:
            return CategoricalMapper(CategoricalParams(**fields))
        return BooleanMapper(BooleanParams(**fields))
