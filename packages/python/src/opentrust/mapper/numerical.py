"""
NumericalMapper — continuous values to judgments.

Three reference points define a "geometry of judgment" on the number
line: the value of maximal falsity, of maximal indeterminacy and of
maximal truth.  An input between two adjacent points is linearly
interpolated between the two corresponding degrees; inputs beyond the
outermost points saturate at that point's degree.

For the usual ordering falsity_point < indeterminacy_point < truth_point:

    x ≤ p_F              → (T, I, F) = (0, 0, 1)
    p_F < x < p_I        → I = r, F = 1 − r,   r = (x − p_F)/(p_I − p_F)
    p_I ≤ x < p_T        → T = r, I = 1 − r,   r = (x − p_I)/(p_T − p_I)
    x ≥ p_T              → (1, 0, 0)

The points may be given in any order (e.g. descending, for metrics
where lower is better); the same rule applies between whichever points
are adjacent.  Each output satisfies T + I + F = 1.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from opentrust.errors import InputError, ValidationError
from opentrust.judgment import NeutrosophicJudgment
from opentrust.mapper.types import (
    JudgmentValues,
    Mapper,
    MapperType,
    NumericalParams,
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class NumericalMapper(Mapper):
    """Map numbers to judgments by interpolating between reference points.

    Example::

        mapper = NumericalMapper(NumericalParams(
            id="defi-health-factor", version="1.0.0",
            falsity_point=1.0, indeterminacy_point=1.5, truth_point=3.0,
        ))
        mapper.apply(2.25)   # T=0.5, I=0.5, F=0.0
    """

    mapper_type = MapperType.NUMERICAL

    def __init__(self, params: NumericalParams) -> None:
        self.parameters = params
        self.validate()

    @property
    def points(self) -> list[tuple[float, str]]:
        """Reference points as (value, degree) sorted by value."""
        p = self.parameters
        return sorted(
            [(p.falsity_point, "F"), (p.indeterminacy_point, "I"), (p.truth_point, "T")]
        )

    def validate(self) -> bool:
        p = self.parameters
        for name in ("falsity_point", "indeterminacy_point", "truth_point"):
            value = getattr(p, name)
            if not _is_number(value) or not math.isfinite(value):
                raise ValidationError(
                    f"{name} must be a finite number for NumericalMapper, got: {value!r}"
                )
        if len({p.falsity_point, p.indeterminacy_point, p.truth_point}) < 3:
            raise ValidationError(
                "falsity_point, indeterminacy_point, and truth_point must be "
                "distinct for NumericalMapper"
            )
        return True

    def apply(
        self, input_value: Any, *, timestamp: Optional[str] = None
    ) -> NeutrosophicJudgment:
        """Map a number to a judgment.

        Raises:
            InputError: If *input_value* is not a finite number, or lies
                outside the reference range while ``clamp_to_range`` is
                disabled.
        """
        if not _is_number(input_value):
            raise InputError(
                "Input for NumericalMapper must be a number, "
                f"got {type(input_value).__name__}"
            )
        if not math.isfinite(input_value):
            raise InputError(f"Input for NumericalMapper must be finite, got {input_value}")

        points = self.points
        low, high = points[0][0], points[-1][0]
        if input_value < low or input_value > high:
            if not self.parameters.clamp_to_range:
                raise InputError(
                    f"Input value {input_value} is out of the defined mapper range "
                    f"[{low}, {high}] and clamp_to_range is False"
                )
            value = min(max(input_value, low), high)
        else:
            value = input_value

        return self._judgment(self.interpolate(value), input_value, timestamp)

    def interpolate(self, value: float) -> JudgmentValues:
        """Degrees for a value already inside the reference range."""
        degrees = {"T": 0.0, "I": 0.0, "F": 0.0}
        points = self.points

        if value <= points[0][0]:
            degrees[points[0][1]] = 1.0
        elif value >= points[-1][0]:
            degrees[points[-1][1]] = 1.0
        else:
            for (start, start_deg), (end, end_deg) in zip(points, points[1:]):
                if start <= value <= end:
                    ratio = (value - start) / (end - start)
                    degrees[end_deg] = ratio
                    degrees[start_deg] = 1.0 - ratio
                    break

        return JudgmentValues(degrees["T"], degrees["I"], degrees["F"])
