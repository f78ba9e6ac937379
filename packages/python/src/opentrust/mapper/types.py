"""Shared mapper types: parameters, the Mapper base class, and helpers."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from opentrust.canonical import format_number
from opentrust.errors import InputError, ValidationError
from opentrust.judgment import (
    NeutrosophicJudgment,
    ProvenanceEntry,
    utc_timestamp,
    validate_degrees,
)


class MapperType(str, Enum):
    NUMERICAL = "numerical"
    CATEGORICAL = "categorical"
    BOOLEAN = "boolean"


TRUE_STRINGS = ("true", "yes", "1", "on", "enabled")
FALSE_STRINGS = ("false", "no", "0", "off", "disabled")


@dataclass(frozen=True)
class JudgmentValues:
    """A validated (T, I, F) triple without provenance."""

    truth: float
    indeterminacy: float
    falsity: float

    def __post_init__(self) -> None:
        t, i, f = validate_degrees(self.truth, self.indeterminacy, self.falsity)
        object.__setattr__(self, "truth", t)
        object.__setattr__(self, "indeterminacy", i)
        object.__setattr__(self, "falsity", f)

    def to_dict(self) -> dict[str, float]:
        return {"T": self.truth, "I": self.indeterminacy, "F": self.falsity}

    @classmethod
    def coerce(cls, value: Any) -> JudgmentValues:
        """Accept a JudgmentValues, a ``{T, I, F}`` mapping or a 3-sequence."""
        if isinstance(value, JudgmentValues):
            return value
        if isinstance(value, Mapping):
            missing = [k for k in ("T", "I", "F") if k not in value]
            if missing:
                raise ValidationError(f"Judgment values are missing keys: {missing}")
            return cls(value["T"], value["I"], value["F"])
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return cls(*value)
        raise ValidationError(
            f"Judgment values must be a mapping with T, I, F, got: {type(value).__name__}"
        )


# ── Parameters ─────────────────────────────────────────────────────


@dataclass(kw_only=True)
class BaseMapperParams:
    """Fields common to every mapper configuration."""

    id: str
    version: str
    description: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    def _base_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "version": self.version}
        if self.description is not None:
            result["description"] = self.description
        if self.metadata is not None:
            result["metadata"] = dict(self.metadata)
        return result


@dataclass(kw_only=True)
class NumericalParams(BaseMapperParams):
    falsity_point: float
    indeterminacy_point: float
    truth_point: float
    clamp_to_range: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            **self._base_dict(),
            "falsity_point": self.falsity_point,
            "indeterminacy_point": self.indeterminacy_point,
            "truth_point": self.truth_point,
            "clamp_to_range": self.clamp_to_range,
        }


@dataclass(kw_only=True)
class CategoricalParams(BaseMapperParams):
    mappings: dict[str, JudgmentValues]
    default_judgment: Optional[JudgmentValues] = None

    def __post_init__(self) -> None:
        self.mappings = {
            str(k): JudgmentValues.coerce(v) for k, v in self.mappings.items()
        }
        if self.default_judgment is not None:
            self.default_judgment = JudgmentValues.coerce(self.default_judgment)

    def to_dict(self) -> dict[str, Any]:
        result = {
            **self._base_dict(),
            "mappings": {k: v.to_dict() for k, v in self.mappings.items()},
        }
        if self.default_judgment is not None:
            result["default_judgment"] = self.default_judgment.to_dict()
        return result


@dataclass(kw_only=True)
class BooleanParams(BaseMapperParams):
    true_map: JudgmentValues
    false_map: JudgmentValues

    def __post_init__(self) -> None:
        self.true_map = JudgmentValues.coerce(self.true_map)
        self.false_map = JudgmentValues.coerce(self.false_map)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self._base_dict(),
            "true_map": self.true_map.to_dict(),
            "false_map": self.false_map.to_dict(),
        }


# ── Mapper base ────────────────────────────────────────────────────


class Mapper(ABC):
    """Transforms raw domain data into a :class:`NeutrosophicJudgment`."""

    mapper_type: MapperType
    parameters: BaseMapperParams

    @property
    def id(self) -> str:
        return self.parameters.id

    @abstractmethod
    def apply(self, input_value: Any, *, timestamp: Optional[str] = None) -> NeutrosophicJudgment:
        """Map *input_value* to a judgment with a single provenance entry."""

    @abstractmethod
    def validate(self) -> bool:
        """Return True, or raise ValidationError for a bad configuration."""

    def _original_input(self, input_value: Any) -> dict[str, Any]:
        return {"value": _js_string(input_value), "type": self.mapper_type.value}

    def create_provenance_entry(
        self, input_value: Any, timestamp: Optional[str] = None
    ) -> ProvenanceEntry:
        return ProvenanceEntry(
            source_id=self.parameters.id,
            timestamp=timestamp or utc_timestamp(),
            description=f"Mapper transformation using {self.parameters.id}",
            metadata={
                "mapper_version": self.parameters.version,
                "mapper_type": self.mapper_type.value,
                "original_input": self._original_input(input_value),
            },
        )

    def _judgment(
        self, values: JudgmentValues, input_value: Any, timestamp: Optional[str]
    ) -> NeutrosophicJudgment:
        return NeutrosophicJudgment(
            truth=values.truth,
            indeterminacy=values.indeterminacy,
            falsity=values.falsity,
            provenance_chain=[self.create_provenance_entry(input_value, timestamp)],
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.parameters.id!r})"


# ── Helpers ────────────────────────────────────────────────────────


def _js_string(value: Any) -> str:
    """Stringify a raw input the way provenance records it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def normalize_boolean_input(value: Any) -> bool:
    """Interpret bool, 0/1 or a boolean-like string.

    Raises:
        InputError: If *value* has no boolean interpretation.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        raise InputError(f"Numeric input must be 0 or 1, got {value}")
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in TRUE_STRINGS:
            return True
        if lower in FALSE_STRINGS:
            return False
        raise InputError(
            f"String input must be a valid boolean representation, got '{value}'"
        )
    raise InputError(
        f"Input must be boolean, number (0/1), or string, got {type(value).__name__}"
    )
