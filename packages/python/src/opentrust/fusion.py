"""
Fusion operators — combine several judgments into one.

Three deterministic operators are provided:

``conflict_aware_weighted_average`` (``otp-cawa-v1.1``)
    The primary operator.  Each judgment's weight is discounted by its
    internal conflict c_i = T_i · F_i (a source asserting strong truth
    and strong falsity at once):

        w'_i = w_i · (1 − c_i)
        X    = Σ_i X_i · w'_i / Σ_i w'_i     for X ∈ {T, I, F}

    When Σ w'_i = 0 the result is the unweighted mean.  Either way the
    output is a convex combination of the inputs, so T + I + F ≤ 1 is
    preserved.

``optimistic_fusion`` (``otp-optimistic-v1.1``)
    T = max T_i,  F = min F_i,  I = mean I_i.

``pessimistic_fusion`` (``otp-pessimistic-v1.1``)
    T = min T_i,  F = max F_i,  I = mean I_i.

    For both extremal operators, if T + I + F > 1 all three degrees are
    divided by their sum, keeping their ratios.

Every operator concatenates the input provenance chains in input order,
appends one fusion entry carrying a conformance seal, and finally
assigns the result a judgment id.  Seal generation failures are logged
and replaced by the ``seal-generation-failed`` sentinel; the fusion
itself still succeeds.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any, Optional

from opentrust import conformance
from opentrust._constants import (
    CAWA_OPERATOR_ID,
    OPTIMISTIC_OPERATOR_ID,
    PESSIMISTIC_OPERATOR_ID,
    PROTOCOL_VERSION,
    SEAL_GENERATION_FAILED,
)
from opentrust.errors import ConformanceError, ValidationError
from opentrust.judgment import NeutrosophicJudgment, ProvenanceEntry, utc_timestamp
from opentrust.judgment_id import ensure_judgment_id

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# UTILITY
# ═══════════════════════════════════════════════════════════════════


def _validate_inputs(
    judgments: Sequence[NeutrosophicJudgment],
    weights: Optional[Sequence[float]] = None,
) -> None:
    """Reject inputs no fusion operator can work with."""
    if judgments is None or len(judgments) == 0:
        raise ValidationError("Judgments list cannot be empty")
    for j in judgments:
        if not isinstance(j, NeutrosophicJudgment):
            raise ValidationError(
                "All items in the judgments list must be of type "
                f"NeutrosophicJudgment, got: {type(j).__name__}"
            )

    if weights is None:
        return
    if len(judgments) != len(weights):
        raise ValidationError(
            "Judgments list and weights list must have the same length"
        )
    for w in weights:
        if isinstance(w, bool) or not isinstance(w, (int, float)):
            raise ValidationError(
                f"All weights must be numeric, got: {type(w).__name__}"
            )
        if math.isnan(w) or math.isinf(w):
            raise ValidationError(f"All weights must be finite, got: {w}")
        if w < 0:
            raise ValidationError(f"Weights must be non-negative, got: {w}")


def _rescale(t: float, i: float, f: float) -> tuple[float, float, float]:
    """Restore T + I + F ≤ 1 by proportional scaling."""
    total = t + i + f
    if total > 1.0:
        return t / total, i / total, f / total
    return t, i, f


def _seal_or_sentinel(
    judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
    operator_id: str,
) -> str:
    try:
        return conformance.generate_conformance_seal(judgments, weights, operator_id)
    except (ConformanceError, TypeError, ValueError) as exc:
        logger.warning("Failed to generate conformance seal: %s", exc)
        return SEAL_GENERATION_FAILED


def _finalize(
    values: tuple[float, float, float],
    judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
    operator_id: str,
    operator_name: str,
    description: str,
    timestamp: Optional[str],
) -> NeutrosophicJudgment:
    """Attach provenance, seal and id to a fused triple."""
    seal = _seal_or_sentinel(judgments, weights, operator_id)
    ts = timestamp or utc_timestamp()

    chain: list[ProvenanceEntry] = []
    for judgment in judgments:
        chain.extend(judgment.provenance_chain)

    metadata: dict[str, Any] = {
        "operator": operator_name,
        "input_count": len(judgments),
        "weights": list(weights),
        "version": PROTOCOL_VERSION,
    }
    chain.append(
        conformance.create_fusion_provenance_entry(
            operator_id, ts, seal, description, metadata
        )
    )

    t, i, f = values
    fused = NeutrosophicJudgment(
        truth=t, indeterminacy=i, falsity=f, provenance_chain=chain
    )
    return ensure_judgment_id(fused, timestamp=ts)


# ═══════════════════════════════════════════════════════════════════
# OPERATORS
# ═══════════════════════════════════════════════════════════════════


def conflict_aware_weighted_average(
    judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
    *,
    timestamp: Optional[str] = None,
) -> NeutrosophicJudgment:
    """Conflict-aware weighted average — the primary OTP operator.

    Args:
        judgments: One or more judgments to fuse.
        weights:   One non-negative weight per judgment.
        timestamp: Optional ISO-8601 timestamp for the new provenance
                   entries (defaults to now).

    Returns:
        The fused judgment, sealed and carrying a judgment id.

    Raises:
        ValidationError: On an empty list, a non-judgment element, a
            length mismatch, or a non-numeric/negative weight.
    """
    _validate_inputs(judgments, weights)

    adjusted = [
        w * (1.0 - j.truth * j.falsity) for j, w in zip(judgments, weights)
    ]
    total_weight = sum(adjusted)

    if len(judgments) == 1:
        only = judgments[0]
        values = (only.truth, only.indeterminacy, only.falsity)
    elif total_weight == 0:
        logger.debug("cawa: adjusted weights sum to zero, using unweighted mean")
        n = len(judgments)
        values = (
            sum(j.truth for j in judgments) / n,
            sum(j.indeterminacy for j in judgments) / n,
            sum(j.falsity for j in judgments) / n,
        )
    else:
        values = (
            sum(j.truth * w for j, w in zip(judgments, adjusted)) / total_weight,
            sum(j.indeterminacy * w for j, w in zip(judgments, adjusted)) / total_weight,
            sum(j.falsity * w for j, w in zip(judgments, adjusted)) / total_weight,
        )

    logger.debug("cawa: fused %d judgments", len(judgments))
    return _finalize(
        values,
        judgments,
        weights,
        CAWA_OPERATOR_ID,
        "conflict_aware_weighted_average",
        "Conflict-aware weighted average fusion operation with Conformance Seal",
        timestamp,
    )


def optimistic_fusion(
    judgments: Sequence[NeutrosophicJudgment],
    *,
    timestamp: Optional[str] = None,
) -> NeutrosophicJudgment:
    """Best-case fusion: max T, min F, mean I.

    Useful for opportunity analysis.  Sealed with a weight of 1.0 per
    input.
    """
    _validate_inputs(judgments)

    values = _rescale(
        max(j.truth for j in judgments),
        sum(j.indeterminacy for j in judgments) / len(judgments),
        min(j.falsity for j in judgments),
    )

    logger.debug("optimistic: fused %d judgments", len(judgments))
    return _finalize(
        values,
        judgments,
        [1.0] * len(judgments),
        OPTIMISTIC_OPERATOR_ID,
        "optimistic_fusion",
        "Optimistic fusion operation with Conformance Seal",
        timestamp,
    )


def pessimistic_fusion(
    judgments: Sequence[NeutrosophicJudgment],
    *,
    timestamp: Optional[str] = None,
) -> NeutrosophicJudgment:
    """Worst-case fusion: min T, max F, mean I.

    Indispensable for risk analysis.  Sealed with a weight of 1.0 per
    input.
    """
    _validate_inputs(judgments)

    values = _rescale(
        min(j.truth for j in judgments),
        sum(j.indeterminacy for j in judgments) / len(judgments),
        max(j.falsity for j in judgments),
    )

    logger.debug("pessimistic: fused %d judgments", len(judgments))
    return _finalize(
        values,
        judgments,
        [1.0] * len(judgments),
        PESSIMISTIC_OPERATOR_ID,
        "pessimistic_fusion",
        "Pessimistic fusion operation with Conformance Seal",
        timestamp,
    )
