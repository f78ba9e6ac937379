"""BooleanMapper — boolean-like values to predefined judgments."""

from __future__ import annotations

from typing import Any, Optional

from opentrust.errors import InputError, ValidationError
from opentrust.judgment import NeutrosophicJudgment
from opentrust.mapper.types import (
    FALSE_STRINGS,
    TRUE_STRINGS,
    BooleanParams,
    JudgmentValues,
    Mapper,
    MapperType,
    normalize_boolean_input,
)


class BooleanMapper(Mapper):
    """Map true / false inputs to two fixed judgments.

    Accepted inputs: ``True``/``False``, ``1``/``0``, and the strings
    ``true, yes, 1, on, enabled`` / ``false, no, 0, off, disabled``
    (case-insensitive).
    """

    mapper_type = MapperType.BOOLEAN

    def __init__(self, params: BooleanParams) -> None:
        self.parameters = params
        self.validate()

    def validate(self) -> bool:
        p = self.parameters
        for name in ("true_map", "false_map"):
            try:
                setattr(p, name, JudgmentValues.coerce(getattr(p, name)))
            except ValidationError as exc:
                raise ValidationError(f"Invalid {name} in BooleanMapper: {exc}") from exc
        return True

    def apply(
        self, input_value: Any, *, timestamp: Optional[str] = None
    ) -> NeutrosophicJudgment:
        state = normalize_boolean_input(input_value)
        values = self.parameters.true_map if state else self.parameters.false_map
        return self._judgment(values, input_value, timestamp)

    def _original_input(self, input_value: Any) -> dict[str, Any]:
        original = super()._original_input(input_value)
        original["normalized"] = "true" if normalize_boolean_input(input_value) else "false"
        return original

    # ── Introspection ──────────────────────────────────────────────

    def normalize(self, input_value: Any) -> bool:
        return normalize_boolean_input(input_value)

    def can_normalize(self, input_value: Any) -> bool:
        try:
            normalize_boolean_input(input_value)
        except InputError:
            return False
        return True

    @staticmethod
    def supported_strings() -> dict[str, list[str]]:
        return {"true": list(TRUE_STRINGS), "false": list(FALSE_STRINGS)}

    def set_true_judgment(self, values: Any) -> None:
        self.parameters.true_map = JudgmentValues.coerce(values)

    def set_false_judgment(self, values: Any) -> None:
        self.parameters.false_map = JudgmentValues.coerce(values)

    # ── Presets ────────────────────────────────────────────────────

    @classmethod
    def standard_trust(cls, id: str, version: str = "1.0.0") -> BooleanMapper:
        """Complete trust for true, complete distrust for false."""
        return cls(BooleanParams(
            id=id, version=version,
            true_map=JudgmentValues(1.0, 0.0, 0.0),
            false_map=JudgmentValues(0.0, 0.0, 1.0),
        ))

    @classmethod
    def security(cls, id: str, version: str = "1.0.0") -> BooleanMapper:
        """High trust with some doubt for true, complete failure for false."""
        return cls(BooleanParams(
            id=id, version=version,
            true_map=JudgmentValues(0.9, 0.1, 0.0),
            false_map=JudgmentValues(0.0, 0.0, 1.0),
        ))

    @classmethod
    def conservative(cls, id: str, version: str = "1.0.0") -> BooleanMapper:
        """Hedged mappings on both sides."""
        return cls(BooleanParams(
            id=id, version=version,
            true_map=JudgmentValues(0.7, 0.3, 0.0),
            false_map=JudgmentValues(0.0, 0.2, 0.8),
        ))
