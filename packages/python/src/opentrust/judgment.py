"""
Neutrosophic Judgment — the core value type of opentrust.

A judgment ω = (T, I, F) records evidence about a proposition together
with the provenance chain that produced it:
    T ∈ [0,1]  — degree of truth
    I ∈ [0,1]  — degree of indeterminacy
    F ∈ [0,1]  — degree of falsity
    Constraint: T + I + F ≤ 1

Unlike an opinion in Subjective Logic the three degrees need not sum to
one.  The gap 1 − (T + I + F) is unassigned mass: uncertainty that no
source has modelled.

A judgment is immutable.  Its provenance chain is an append-only log,
oldest entry first; derived judgments (mapper outputs, fusion results)
are new instances whose chain extends the chains of their inputs.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Optional

from opentrust._constants import CONSERVATION_TOL
from opentrust.canonical import canonical_json, canonical_metadata
from opentrust.errors import ValidationError

_EMPTY: Mapping[str, Any] = MappingProxyType({})

# Keys a provenance entry understands; anything else lands in ``extra``
_ENTRY_FIELDS = (
    "source_id",
    "timestamp",
    "description",
    "metadata",
    "judgment_id",
    "conformance_seal",
)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _freeze(value: Any) -> Any:
    """Recursively convert dicts and lists to read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of :func:`_freeze`: plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def validate_degree(value: Any, name: str) -> float:
    """Validate a single degree (T, I or F) and return it as a float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{name} value must be a number, got: {type(value).__name__}"
        )
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(f"{name} value must be finite, got: {value}")
    if value < 0.0 or value > 1.0:
        raise ValidationError(f"{name} value must be between 0 and 1, got: {value}")
    return float(value)


def validate_degrees(t: Any, i: Any, f: Any) -> tuple[float, float, float]:
    """Validate a (T, I, F) triple including the conservation constraint.

    Raises:
        ValidationError: If any degree is out of range or
            T + I + F exceeds 1 (beyond floating-point tolerance).
    """
    t = validate_degree(t, "T")
    i = validate_degree(i, "I")
    f = validate_degree(f, "F")
    total = t + i + f
    if total > 1.0 + CONSERVATION_TOL:
        raise ValidationError(
            f"Conservation constraint violated: T + I + F = {total} > 1.0"
        )
    return t, i, f


@dataclass(frozen=True)
class ProvenanceEntry:
    """One step in a judgment's provenance chain.

    Attributes:
        source_id:        Identifier of the source or operator.  Required.
        timestamp:        ISO-8601 timestamp.  Required.
        description:      Human-readable description.
        metadata:         Free-form, read-only metadata mapping.
        judgment_id:      Content id, set on identity-generator entries.
        conformance_seal: Seal, set on fusion entries.
        extra:            Unrecognised keys preserved for round-tripping.
                          Never part of a canonical form.
    """

    source_id: str
    timestamp: str
    description: Optional[str] = None
    metadata: Optional[Mapping[str, Any]] = None
    judgment_id: Optional[str] = None
    conformance_seal: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        if not isinstance(self.source_id, str) or not self.source_id:
            raise ValidationError("Provenance entry must have source_id")
        if not isinstance(self.timestamp, str) or not self.timestamp:
            raise ValidationError("Provenance entry must have timestamp")
        if self.description is not None and not isinstance(self.description, str):
            raise ValidationError("Provenance entry description must be a string")
        for name in ("judgment_id", "conformance_seal"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"Provenance entry {name} must be a string")
        if self.metadata is not None:
            if not isinstance(self.metadata, Mapping):
                raise ValidationError("Provenance entry metadata must be a mapping")
            try:
                canonical_json(canonical_metadata(self.metadata))
            except (TypeError, ValueError) as exc:
                raise ValidationError(
                    f"Provenance entry metadata must be JSON-serializable: {exc}"
                ) from exc
            object.__setattr__(self, "metadata", _freeze(self.metadata))
        if not isinstance(self.extra, Mapping):
            raise ValidationError("Provenance entry extra must be a mapping")
        object.__setattr__(self, "extra", _freeze(self.extra))

    def __hash__(self) -> int:
        # metadata and extra compare equal across key order and 1 vs 1.0,
        # so only the scalar fields feed the hash
        return hash(
            (
                self.source_id,
                self.timestamp,
                self.description,
                self.judgment_id,
                self.conformance_seal,
            )
        )

    # ── Canonical form ─────────────────────────────────────────────

    def canonical_form(self) -> dict[str, Any]:
        """Reduce the entry to its defined fields, in canonical order.

        ``judgment_id``, ``conformance_seal`` and ``extra`` are always
        dropped, for both the seal and the identity hash.
        """
        result: dict[str, Any] = {
            "source_id": self.source_id,
            "timestamp": self.timestamp,
        }
        if self.description is not None:
            result["description"] = self.description
        if self.metadata is not None:
            result["metadata"] = canonical_metadata(self.metadata)
        return result

    # ── Serialization ──────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict, preserving extra keys."""
        result: dict[str, Any] = {
            "source_id": self.source_id,
            "timestamp": self.timestamp,
        }
        if self.description is not None:
            result["description"] = self.description
        if self.metadata is not None:
            result["metadata"] = _thaw(self.metadata)
        if self.judgment_id is not None:
            result["judgment_id"] = self.judgment_id
        if self.conformance_seal is not None:
            result["conformance_seal"] = self.conformance_seal
        for key, value in self.extra.items():
            result[key] = _thaw(value)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProvenanceEntry:
        """Build an entry from a dict such as one produced by :meth:`to_dict`."""
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Provenance entry must be a mapping, got: {type(data).__name__}"
            )
        return cls(
            source_id=data.get("source_id"),  # type: ignore[arg-type]
            timestamp=data.get("timestamp"),  # type: ignore[arg-type]
            description=data.get("description"),
            metadata=data.get("metadata"),
            judgment_id=data.get("judgment_id"),
            conformance_seal=data.get("conformance_seal"),
            extra={k: v for k, v in data.items() if k not in _ENTRY_FIELDS},
        )


def _coerce_entry(entry: Any) -> ProvenanceEntry:
    if isinstance(entry, ProvenanceEntry):
        return entry
    if isinstance(entry, Mapping):
        return ProvenanceEntry.from_dict(entry)
    raise ValidationError(
        f"Provenance entry must be a ProvenanceEntry or mapping, "
        f"got: {type(entry).__name__}"
    )


@dataclass(frozen=True, eq=True)
class NeutrosophicJudgment:
    """An immutable (T, I, F) judgment with its provenance chain.

    Attributes:
        truth:            Degree of truth.          T ∈ [0, 1]
        indeterminacy:    Degree of indeterminacy.  I ∈ [0, 1]
        falsity:          Degree of falsity.        F ∈ [0, 1]
        provenance_chain: Non-empty tuple of entries, oldest first.
                          Plain dicts are accepted and converted.

    Invariant:
        T + I + F ≤ 1  (within floating-point tolerance)

    Equality is structural: degrees plus the full provenance content.
    """

    truth: float
    indeterminacy: float
    falsity: float
    provenance_chain: tuple[ProvenanceEntry, ...]

    def __post_init__(self) -> None:
        t, i, f = validate_degrees(self.truth, self.indeterminacy, self.falsity)
        object.__setattr__(self, "truth", t)
        object.__setattr__(self, "indeterminacy", i)
        object.__setattr__(self, "falsity", f)

        chain = self.provenance_chain
        if isinstance(chain, (str, bytes, Mapping)) or not isinstance(chain, Sequence):
            raise ValidationError("Provenance chain must be a sequence of entries")
        if len(chain) == 0:
            raise ValidationError("Provenance chain cannot be empty")
        object.__setattr__(
            self, "provenance_chain", tuple(_coerce_entry(e) for e in chain)
        )

    # ── Short aliases matching the wire format ─────────────────────

    @property
    def T(self) -> float:
        return self.truth

    @property
    def I(self) -> float:  # noqa: E743
        return self.indeterminacy

    @property
    def F(self) -> float:
        return self.falsity

    @property
    def judgment_id(self) -> Optional[str]:
        """The most recent ``judgment_id`` recorded in the chain, if any.

        For a fusion of inputs that were already identified this is an
        id inherited from one of the inputs, not an id of the result.
        """
        for entry in reversed(self.provenance_chain):
            if entry.judgment_id:
                return entry.judgment_id
        return None

    def __hash__(self) -> int:
        return hash(
            (self.truth, self.indeterminacy, self.falsity, self.provenance_chain)
        )

    # ── Canonical form ─────────────────────────────────────────────

    def canonical_form(self) -> dict[str, Any]:
        """Deterministic representation used for seals and identities.

        ``judgment_id`` and ``conformance_seal`` are excluded from every
        entry, so an id never hashes itself and a seal over identified
        inputs matches one over the same inputs before identification.
        """
        return {
            "T": self.truth,
            "I": self.indeterminacy,
            "F": self.falsity,
            "provenance_chain": [
                entry.canonical_form() for entry in self.provenance_chain
            ],
        }

    # ── Serialization ──────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the Judgment JSON shape."""
        return {
            "T": self.truth,
            "I": self.indeterminacy,
            "F": self.falsity,
            "provenance_chain": [e.to_dict() for e in self.provenance_chain],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NeutrosophicJudgment:
        """Deserialize from the Judgment JSON shape, re-validating."""
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Judgment data must be a mapping, got: {type(data).__name__}"
            )
        missing = [k for k in ("T", "I", "F", "provenance_chain") if k not in data]
        if missing:
            raise ValidationError(f"Judgment data is missing keys: {missing}")
        return cls(
            truth=data["T"],
            indeterminacy=data["I"],
            falsity=data["F"],
            provenance_chain=data["provenance_chain"],
        )

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> NeutrosophicJudgment:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Judgment is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    # ── Representation ─────────────────────────────────────────────

    def __repr__(self) -> str:
        return (
            f"NeutrosophicJudgment(T={self.truth}, I={self.indeterminacy}, "
            f"F={self.falsity})"
        )
