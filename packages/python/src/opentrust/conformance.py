"""
Conformance Seals for fusion operations.

A conformance seal is a SHA-256 fingerprint over the inputs, weights and
operator of a fusion step.  Anyone holding the same inputs can recompute
it and compare against the seal stored on the fused judgment; if any
degree, provenance field, weight, or the set of judgments differs, the
recomputed seal differs too.

Seal algorithm:
    1. Pair each judgment's canonical form (``judgment_id`` and
       ``conformance_seal`` excluded) with its weight.
    2. Stable-sort the pairs by the ``source_id`` of each judgment's
       last provenance entry, so the seal does not depend on the order
       the caller passed the inputs in.  The comparison is by Unicode
       code point, not locale collation: ``"B"`` sorts before ``"a"``.
    3. Serialize the sorted pairs with :func:`canonical_json`.
    4. Hash ``<json>::<operator_id>`` with SHA-256 (lowercase hex).

The seal is a function of the original inputs, which are not
recoverable from the fused output.  Verification therefore always needs
the inputs: :func:`verify_conformance_seal_with_inputs`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from opentrust._constants import JUDGMENT_ID_GENERATOR, SEAL_SEPARATOR
from opentrust.canonical import canonical_json, sha256_hex
from opentrust.errors import ConformanceError
from opentrust.judgment import NeutrosophicJudgment, ProvenanceEntry


def _sort_key(pair: dict[str, Any]) -> str:
    chain = pair["judgment"]["provenance_chain"]
    return chain[-1]["source_id"] if chain else ""


def canonical_seal_payload(
    judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
) -> str:
    """Canonical JSON of the sorted judgment/weight pairs (steps 1–3)."""
    pairs = [
        {"judgment": j.canonical_form(), "weight": w}
        for j, w in zip(judgments, weights)
    ]
    # list.sort is stable: equal source_ids keep their input order
    pairs.sort(key=_sort_key)
    return canonical_json(pairs)


def generate_conformance_seal(
    judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
    operator_id: str,
) -> str:
    """Generate the Conformance Seal for a fusion operation.

    Args:
        judgments:   Input judgments of the fusion.
        weights:     One weight per judgment (``1.0`` each for the
                     unweighted operators).
        operator_id: Fusion operator identifier, e.g. ``"otp-cawa-v1.1"``.

    Returns:
        64-character lowercase hex SHA-256 digest.

    Raises:
        ConformanceError: If *judgments* is empty, lengths mismatch,
            *operator_id* is empty, or the inputs cannot be serialized.
    """
    if len(judgments) == 0:
        raise ConformanceError("Invalid input: judgments list cannot be empty")
    if len(judgments) != len(weights):
        raise ConformanceError(
            "Invalid input: judgments and weights length mismatch"
        )
    if not isinstance(operator_id, str) or not operator_id:
        raise ConformanceError("Invalid operator ID: empty")
    for j in judgments:
        if not isinstance(j, NeutrosophicJudgment):
            raise ConformanceError(
                f"Invalid input: expected NeutrosophicJudgment, got: {type(j).__name__}"
            )

    try:
        payload = canonical_seal_payload(judgments, weights)
    except (TypeError, ValueError) as exc:
        raise ConformanceError(f"Serialization error: {exc}") from exc

    return sha256_hex(f"{payload}{SEAL_SEPARATOR}{operator_id}")


def _sealed_entry(judgment: NeutrosophicJudgment) -> ProvenanceEntry:
    """Locate the fusion entry that should carry the seal.

    That is the last entry of the chain, unless the last entry is the
    identity-generator entry appended after fusion, in which case it
    is the entry just before it.
    """
    chain = judgment.provenance_chain
    if len(chain) == 0:
        raise ConformanceError("Empty provenance chain")

    entry = chain[-1]
    if (
        entry.conformance_seal is None
        and entry.source_id == JUDGMENT_ID_GENERATOR
        and len(chain) > 1
    ):
        entry = chain[-2]

    if not entry.conformance_seal:
        raise ConformanceError("Missing conformance seal in fused judgment")
    return entry


def verify_conformance_seal_with_inputs(
    fused_judgment: NeutrosophicJudgment,
    input_judgments: Sequence[NeutrosophicJudgment],
    weights: Sequence[float],
) -> bool:
    """Verify a fused judgment's seal against its claimed inputs.

    The operator id is read back from the sealed entry's ``source_id``.

    Returns:
        True if the regenerated seal equals the stored one.

    Raises:
        ConformanceError: If the chain is empty, no seal is present,
            or the seal cannot be regenerated from the given inputs.
    """
    entry = _sealed_entry(fused_judgment)
    try:
        regenerated = generate_conformance_seal(
            input_judgments, weights, entry.source_id
        )
    except ConformanceError as exc:
        raise ConformanceError(f"Failed to regenerate seal: {exc}") from exc
    return entry.conformance_seal == regenerated


def verify_conformance_seal(fused_judgment: NeutrosophicJudgment) -> bool:
    """Seal-only verification.  Always raises.

    A seal is a function of the original inputs and weights, which
    cannot be recovered from the fused judgment alone.

    Raises:
        ConformanceError: Always; use
            :func:`verify_conformance_seal_with_inputs` instead.
    """
    _sealed_entry(fused_judgment)
    raise ConformanceError(
        "Verification requires the input judgments and weights; "
        "use verify_conformance_seal_with_inputs() instead."
    )


def create_fusion_provenance_entry(
    operator_id: str,
    timestamp: str,
    conformance_seal: str,
    description: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> ProvenanceEntry:
    """Build the trailing provenance entry of a fusion step."""
    return ProvenanceEntry(
        source_id=operator_id,
        timestamp=timestamp,
        description=description,
        metadata=metadata,
        conformance_seal=conformance_seal,
    )
