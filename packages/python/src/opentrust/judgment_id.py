"""
Judgment identity and outcome tracking.

Every judgment can be addressed by a content hash of its canonical form,
so a decision can later be linked to what actually happened without
sequential ids or external storage.

Identity algorithm:
    canonical form (degrees + provenance entries reduced to
    ``source_id, timestamp, description, metadata``; any
    ``judgment_id`` and ``conformance_seal`` dropped) → canonical JSON →
    SHA-256 → 64-char lowercase hex.

Dropping ``judgment_id`` keeps the hash non-recursive: appending the id
entry does not change the content the id was computed over, apart from
the new entry itself.

An :class:`OutcomeJudgment` is the oracle's record of a real-world
result, linked back to the decision by ``links_to_judgment_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from opentrust._constants import (
    IMPLEMENTATION_TAG,
    JUDGMENT_ID_DESCRIPTION,
    JUDGMENT_ID_GENERATOR,
    JUDGMENT_ID_PURPOSE,
)
from opentrust.canonical import canonical_json, sha256_hex
from opentrust.errors import ValidationError
from opentrust.judgment import (
    NeutrosophicJudgment,
    ProvenanceEntry,
    utc_timestamp,
    validate_degrees,
)

logger = logging.getLogger(__name__)


class OutcomeType(str, Enum):
    """Kind of real-world outcome recorded by an oracle."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"


@dataclass(frozen=True)
class OutcomeJudgment:
    """A real-world outcome linked to an earlier judgment.

    Not a :class:`NeutrosophicJudgment`: outcomes are recorded once by
    an oracle and are never fused.
    """

    judgment_id: str
    links_to_judgment_id: str
    truth: float
    indeterminacy: float
    falsity: float
    outcome_type: OutcomeType
    oracle_source: str
    provenance_chain: tuple[ProvenanceEntry, ...] = field(default=())

    @property
    def T(self) -> float:
        return self.truth

    @property
    def I(self) -> float:  # noqa: E743
        return self.indeterminacy

    @property
    def F(self) -> float:
        return self.falsity

    def to_dict(self) -> dict[str, Any]:
        return {
            "judgment_id": self.judgment_id,
            "links_to_judgment_id": self.links_to_judgment_id,
            "T": self.truth,
            "I": self.indeterminacy,
            "F": self.falsity,
            "outcome_type": self.outcome_type.value,
            "oracle_source": self.oracle_source,
            "provenance_chain": [e.to_dict() for e in self.provenance_chain],
        }


def generate_judgment_id(judgment: NeutrosophicJudgment) -> str:
    """Content-addressed id of *judgment* (64-char lowercase hex)."""
    if not isinstance(judgment, NeutrosophicJudgment):
        raise ValidationError(
            f"judgment must be a NeutrosophicJudgment, got: {type(judgment).__name__}"
        )
    canonical = judgment.canonical_form()
    return sha256_hex(canonical_json(canonical))


def get_judgment_id(judgment: NeutrosophicJudgment) -> Optional[str]:
    """The most recent ``judgment_id`` in *judgment*'s chain, or ``None``.

    After fusing inputs that already carried ids, no new id entry is
    appended, so this returns the id inherited from the last identified
    input rather than an id computed over the fused result.
    """
    return judgment.judgment_id


def ensure_judgment_id(
    judgment: NeutrosophicJudgment,
    *,
    timestamp: Optional[str] = None,
) -> NeutrosophicJudgment:
    """Return *judgment* with a ``judgment_id`` in its provenance chain.

    Idempotent: if any entry already carries a ``judgment_id`` the
    judgment is returned unchanged.  Otherwise the id is computed over
    the current content and appended in a new trailing entry.
    """
    if judgment.judgment_id is not None:
        return judgment

    judgment_id = generate_judgment_id(judgment)
    id_entry = ProvenanceEntry(
        source_id=JUDGMENT_ID_GENERATOR,
        timestamp=timestamp or utc_timestamp(),
        description=JUDGMENT_ID_DESCRIPTION,
        metadata={
            "generator": IMPLEMENTATION_TAG,
            "purpose": JUDGMENT_ID_PURPOSE,
        },
        judgment_id=judgment_id,
    )
    logger.debug("Generated judgment id %s", judgment_id)

    return NeutrosophicJudgment(
        truth=judgment.truth,
        indeterminacy=judgment.indeterminacy,
        falsity=judgment.falsity,
        provenance_chain=judgment.provenance_chain + (id_entry,),
    )


def create_outcome_judgment(
    links_to_judgment_id: str,
    t: float,
    i: float,
    f: float,
    outcome_type: OutcomeType | str,
    oracle_source: str,
    provenance_chain: Sequence[ProvenanceEntry | Mapping[str, Any]] = (),
    *,
    timestamp: Optional[str] = None,
) -> OutcomeJudgment:
    """Record a real-world outcome for the judgment *links_to_judgment_id*.

    An oracle entry carrying the outcome type and link is appended to
    *provenance_chain*, and the outcome's own id is the judgment id of
    a judgment with the same degrees and chain.

    Raises:
        ValidationError: If a degree is out of range, the conservation
            constraint is violated, or an argument is malformed.
    """
    if not isinstance(links_to_judgment_id, str) or not links_to_judgment_id:
        raise ValidationError("links_to_judgment_id must be a non-empty string")
    if not isinstance(oracle_source, str) or not oracle_source:
        raise ValidationError("oracle_source must be a non-empty string")
    try:
        outcome_type = OutcomeType(outcome_type)
    except ValueError as exc:
        raise ValidationError(f"Unknown outcome_type: {outcome_type!r}") from exc

    t, i, f = validate_degrees(t, i, f)

    oracle_entry = ProvenanceEntry(
        source_id=oracle_source,
        timestamp=timestamp or utc_timestamp(),
        description=f"Outcome recorded by {oracle_source}",
        metadata={
            "outcome_type": outcome_type.value,
            "links_to_judgment_id": links_to_judgment_id,
            "oracle_version": IMPLEMENTATION_TAG,
        },
    )

    carrier = NeutrosophicJudgment(
        truth=t,
        indeterminacy=i,
        falsity=f,
        provenance_chain=[*provenance_chain, oracle_entry],
    )

    return OutcomeJudgment(
        judgment_id=generate_judgment_id(carrier),
        links_to_judgment_id=links_to_judgment_id,
        truth=t,
        indeterminacy=i,
        falsity=f,
        outcome_type=outcome_type,
        oracle_source=oracle_source,
        provenance_chain=carrier.provenance_chain,
    )


def outcome_judgment_to_neutrosophic(outcome: OutcomeJudgment) -> NeutrosophicJudgment:
    """Drop the oracle-specific fields of an outcome."""
    return NeutrosophicJudgment(
        truth=outcome.truth,
        indeterminacy=outcome.indeterminacy,
        falsity=outcome.falsity,
        provenance_chain=outcome.provenance_chain,
    )
