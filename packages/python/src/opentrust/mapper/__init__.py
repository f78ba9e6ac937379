"""Mappers: raw numeric, categorical and boolean data to judgments."""

from opentrust.mapper.types import (
    BaseMapperParams,
    BooleanParams,
    CategoricalParams,
    JudgmentValues,
    Mapper,
    MapperType,
    NumericalParams,
    normalize_boolean_input,
)
from opentrust.mapper.numerical import NumericalMapper
from opentrust.mapper.categorical import CategoricalMapper
from opentrust.mapper.boolean import BooleanMapper
from opentrust.mapper.validator import MAPPER_SCHEMAS, MapperValidator
from opentrust.mapper.registry import MapperRegistry

__all__ = [
    "BaseMapperParams",
    "BooleanMapper",
    "BooleanParams",
    "CategoricalMapper",
    "CategoricalParams",
    "JudgmentValues",
    "MAPPER_SCHEMAS",
    "Mapper",
    "MapperRegistry",
    "MapperType",
    "MapperValidator",
    "NumericalMapper",
    "NumericalParams",
    "normalize_boolean_input",
]
