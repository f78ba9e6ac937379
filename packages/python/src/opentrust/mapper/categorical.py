"""CategoricalMapper — named categories to predefined judgments."""

from __future__ import annotations

from typing import Any, Optional

from opentrust.errors import InputError, ValidationError
from opentrust.judgment import NeutrosophicJudgment
from opentrust.mapper.types import (
    CategoricalParams,
    JudgmentValues,
    Mapper,
    MapperType,
)


class CategoricalMapper(Mapper):
    """Map string categories to fixed judgments.

    Unknown categories fall back to ``default_judgment`` when one is
    configured, and raise :class:`InputError` otherwise.

    Example::

        mapper = CategoricalMapper(CategoricalParams(
            id="kyc-status", version="1.0.0",
            mappings={
                "VERIFIED": {"T": 1.0, "I": 0.0, "F": 0.0},
                "PENDING": {"T": 0.0, "I": 1.0, "F": 0.0},
                "REJECTED": {"T": 0.0, "I": 0.0, "F": 1.0},
            },
        ))
        mapper.apply("VERIFIED")   # T=1.0, I=0.0, F=0.0
    """

    mapper_type = MapperType.CATEGORICAL

    def __init__(self, params: CategoricalParams) -> None:
        self.parameters = params
        self.validate()

    def validate(self) -> bool:
        # JudgmentValues validates on construction; this re-checks
        # entries that were mutated in place on the params object.
        p = self.parameters
        for category, values in p.mappings.items():
            try:
                p.mappings[category] = JudgmentValues.coerce(values)
            except ValidationError as exc:
                raise ValidationError(
                    f"Invalid judgment for category '{category}' in CategoricalMapper: {exc}"
                ) from exc
        if p.default_judgment is not None:
            try:
                p.default_judgment = JudgmentValues.coerce(p.default_judgment)
            except ValidationError as exc:
                raise ValidationError(
                    f"Invalid default_judgment in CategoricalMapper: {exc}"
                ) from exc
        return True

    def apply(
        self, input_value: Any, *, timestamp: Optional[str] = None
    ) -> NeutrosophicJudgment:
        if not isinstance(input_value, str):
            raise InputError(
                "Input for CategoricalMapper must be a string, "
                f"got {type(input_value).__name__}"
            )
        values = self.parameters.mappings.get(input_value)
        if values is None:
            values = self.parameters.default_judgment
        if values is None:
            raise InputError(
                f"Input category '{input_value}' not found in mapper and no "
                "default_judgment is defined"
            )
        return self._judgment(values, input_value, timestamp)

    # ── Category management ────────────────────────────────────────

    @property
    def categories(self) -> list[str]:
        return list(self.parameters.mappings)

    def has_category(self, category: str) -> bool:
        return category in self.parameters.mappings

    def judgment_for_category(self, category: str) -> Optional[JudgmentValues]:
        return self.parameters.mappings.get(category)

    def add_category(self, category: str, values: Any) -> None:
        self.parameters.mappings[category] = JudgmentValues.coerce(values)

    def remove_category(self, category: str) -> bool:
        return self.parameters.mappings.pop(category, None) is not None

    def set_default_judgment(self, values: Any) -> None:
        self.parameters.default_judgment = JudgmentValues.coerce(values)

    def clear_default_judgment(self) -> None:
        self.parameters.default_judgment = None
