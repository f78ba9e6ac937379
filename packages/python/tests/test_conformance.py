"""Tests for Conformance Seal generation and verification.

seal = SHA-256( canonical_json(sorted [{judgment, weight}]) + "::" + operator_id )

Pairs are sorted by the source_id of each judgment's last provenance
entry, so the seal is independent of input order.
"""

import pytest

from opentrust.conformance import (
    canonical_seal_payload,
    create_fusion_provenance_entry,
    generate_conformance_seal,
    verify_conformance_seal,
    verify_conformance_seal_with_inputs,
)
from opentrust.errors import ConformanceError
from opentrust.judgment import NeutrosophicJudgment, ProvenanceEntry

TS = "2023-01-01T00:00:00Z"
OP = "otp-cawa-v1.1"


def _judgment(t, i, f, source_id, **entry_kwargs):
    return NeutrosophicJudgment(
        t, i, f, [ProvenanceEntry(source_id=source_id, timestamp=TS, **entry_kwargs)]
    )


@pytest.fixture
def inputs():
    j1 = _judgment(0.8, 0.2, 0.0, "sensor1")
    j2 = _judgment(0.6, 0.3, 0.1, "sensor2")
    return [j1, j2], [0.6, 0.4]


def _sealed(judgments, weights, operator_id=OP, extra_entries=()):
    seal = generate_conformance_seal(judgments, weights, operator_id)
    entry = create_fusion_provenance_entry(operator_id, TS, seal, "Test fusion operation")
    return NeutrosophicJudgment(0.74, 0.24, 0.02, [entry, *extra_entries])


# ═══════════════════════════════════════════════════════════════════
# Generation
# ═══════════════════════════════════════════════════════════════════


class TestGenerateSeal:

    def test_shape(self, inputs):
        seal = generate_conformance_seal(*inputs, OP)
        assert len(seal) == 64
        assert all(c in "0123456789abcdef" for c in seal)

    def test_golden_hash(self, inputs):
        """Pin the exact canonical text and digest."""
        expected_text = (
            '[{"judgment":{"T":0.8,"I":0.2,"F":0,"provenance_chain":'
            '[{"source_id":"sensor1","timestamp":"2023-01-01T00:00:00Z"}]},"weight":0.6},'
            '{"judgment":{"T":0.6,"I":0.3,"F":0.1,"provenance_chain":'
            '[{"source_id":"sensor2","timestamp":"2023-01-01T00:00:00Z"}]},"weight":0.4}]'
        )
        assert canonical_seal_payload(*inputs) == expected_text
        assert generate_conformance_seal(*inputs, OP) == (
            "43dd7c92dabd9c5187ace6cd822b4aff800b325a260a866302be8cfc0c79f4ad"
        )

    def test_deterministic(self, inputs):
        assert generate_conformance_seal(*inputs, OP) == generate_conformance_seal(*inputs, OP)

    def test_input_order_independent(self, inputs):
        (j1, j2), (w1, w2) = inputs
        assert generate_conformance_seal([j1, j2], [w1, w2], OP) == \
            generate_conformance_seal([j2, j1], [w2, w1], OP)

    def test_sorted_by_last_entry_source_id(self):
        a = NeutrosophicJudgment(0.5, 0.0, 0.0, [
            ProvenanceEntry(source_id="zzz", timestamp=TS),
            ProvenanceEntry(source_id="aaa", timestamp=TS),
        ])
        b = _judgment(0.4, 0.0, 0.0, "mmm")
        payload = canonical_seal_payload([b, a], [1.0, 1.0])
        assert payload.index('"T":0.5') < payload.index('"T":0.4')

    def test_stable_for_equal_source_ids(self):
        a = _judgment(0.5, 0.0, 0.0, "same")
        b = _judgment(0.4, 0.0, 0.0, "same")
        assert generate_conformance_seal([a, b], [1.0, 1.0], OP) != \
            generate_conformance_seal([b, a], [1.0, 1.0], OP)

    def test_operator_id_matters(self, inputs):
        assert generate_conformance_seal(*inputs, OP) != \
            generate_conformance_seal(*inputs, "otp-optimistic-v1.1")

    def test_existing_seal_not_hashed(self):
        a = _judgment(0.5, 0.0, 0.0, "s", conformance_seal="a" * 64)
        b = _judgment(0.5, 0.0, 0.0, "s", conformance_seal="b" * 64)
        assert generate_conformance_seal([a], [1.0], OP) == generate_conformance_seal([b], [1.0], OP)

    def test_existing_judgment_id_not_hashed(self):
        a = _judgment(0.5, 0.0, 0.0, "s", judgment_id="a" * 64)
        b = _judgment(0.5, 0.0, 0.0, "s", judgment_id="b" * 64)
        plain = _judgment(0.5, 0.0, 0.0, "s")
        seal = generate_conformance_seal([a], [1.0], OP)
        assert seal == generate_conformance_seal([b], [1.0], OP)
        assert seal == generate_conformance_seal([plain], [1.0], OP)

    def test_code_point_order(self):
        """Upper-case sorts before lower-case, unlike a locale-aware compare."""
        lower = _judgment(0.1, 0.0, 0.0, "a")
        upper = _judgment(0.2, 0.0, 0.0, "B")
        payload = canonical_seal_payload([lower, upper], [1.0, 1.0])
        assert payload.index('"source_id":"B"') < payload.index('"source_id":"a"')

    def test_golden_hash_identified_input_with_metadata(self):
        """Metadata keeps insertion order and the id entry loses its id."""
        j = NeutrosophicJudgment(0.5, 0.2, 0.1, [
            ProvenanceEntry(
                source_id="feed", timestamp=TS,
                metadata={"zeta": 1, "alpha": [2, {"y": True, "b": None}]},
            ),
            ProvenanceEntry(
                source_id="otp-judgment-id-generator", timestamp=TS,
                judgment_id="c" * 64,
            ),
        ])
        assert canonical_seal_payload([j], [1.0]) == (
            '[{"judgment":{"T":0.5,"I":0.2,"F":0.1,"provenance_chain":['
            '{"source_id":"feed","timestamp":"2023-01-01T00:00:00Z",'
            '"metadata":{"zeta":1,"alpha":[2,{"y":true,"b":null}]}},'
            '{"source_id":"otp-judgment-id-generator","timestamp":"2023-01-01T00:00:00Z"}]},'
            '"weight":1}]'
        )
        assert generate_conformance_seal([j], [1.0], "otp-optimistic-v1.1") == (
            "721044a5b68a67236000859b0496685810ebb92d8fc8e2da6aadc9d97710d095"
        )


class TestGenerateSealErrors:

    def test_empty(self):
        with pytest.raises(ConformanceError, match="cannot be empty"):
            generate_conformance_seal([], [], OP)

    def test_length_mismatch(self, inputs):
        judgments, _ = inputs
        with pytest.raises(ConformanceError, match="length mismatch"):
            generate_conformance_seal(judgments, [1.0], OP)

    def test_empty_operator(self, inputs):
        with pytest.raises(ConformanceError, match="operator ID"):
            generate_conformance_seal(*inputs, "")

    def test_non_judgment(self):
        with pytest.raises(ConformanceError, match="expected NeutrosophicJudgment"):
            generate_conformance_seal([{"T": 0.5}], [1.0], OP)

    def test_unserializable_weight(self, inputs):
        judgments, _ = inputs
        with pytest.raises(ConformanceError, match="Serialization error"):
            generate_conformance_seal(judgments, [float("nan"), 1.0], OP)


# ═══════════════════════════════════════════════════════════════════
# Verification
# ═══════════════════════════════════════════════════════════════════


class TestVerifyWithInputs:

    def test_round_trip(self, inputs):
        fused = _sealed(*inputs)
        assert verify_conformance_seal_with_inputs(fused, *inputs) is True

    def test_round_trip_reordered_inputs(self, inputs):
        (j1, j2), (w1, w2) = inputs
        fused = _sealed([j1, j2], [w1, w2])
        assert verify_conformance_seal_with_inputs(fused, [j2, j1], [w2, w1])

    def test_tampered_degree(self, inputs):
        judgments, weights = inputs
        fused = _sealed(judgments, weights)
        tampered = [_judgment(0.81, 0.19, 0.0, "sensor1"), judgments[1]]
        assert verify_conformance_seal_with_inputs(fused, tampered, weights) is False

    def test_tampered_weight(self, inputs):
        judgments, _ = inputs
        fused = _sealed(judgments, [0.6, 0.4])
        assert verify_conformance_seal_with_inputs(fused, judgments, [0.5, 0.5]) is False

    def test_tampered_provenance(self, inputs):
        judgments, weights = inputs
        fused = _sealed(judgments, weights)
        tampered = [_judgment(0.8, 0.2, 0.0, "sensor1", description="edited"), judgments[1]]
        assert verify_conformance_seal_with_inputs(fused, tampered, weights) is False

    def test_tampered_judgment_set(self, inputs):
        judgments, weights = inputs
        fused = _sealed(judgments, weights)
        extra = _judgment(0.1, 0.1, 0.1, "sensor3")
        assert verify_conformance_seal_with_inputs(
            fused, [*judgments, extra], [*weights, 1.0]
        ) is False

    def test_skips_trailing_id_entry(self, inputs):
        id_entry = ProvenanceEntry(
            source_id="otp-judgment-id-generator", timestamp=TS, judgment_id="c" * 64
        )
        fused = _sealed(*inputs, extra_entries=[id_entry])
        assert verify_conformance_seal_with_inputs(fused, *inputs)

    def test_missing_seal(self, inputs):
        plain = _judgment(0.5, 0.0, 0.0, OP)
        with pytest.raises(ConformanceError, match="Missing conformance seal"):
            verify_conformance_seal_with_inputs(plain, *inputs)

    def test_regeneration_failure_wrapped(self, inputs):
        fused = _sealed(*inputs)
        with pytest.raises(ConformanceError, match="Failed to regenerate seal"):
            verify_conformance_seal_with_inputs(fused, inputs[0], [1.0])


class TestVerifyWithoutInputs:

    def test_always_raises(self, inputs):
        fused = _sealed(*inputs)
        with pytest.raises(ConformanceError, match="verify_conformance_seal_with_inputs"):
            verify_conformance_seal(fused)

    def test_missing_seal_raises(self):
        with pytest.raises(ConformanceError, match="Missing conformance seal"):
            verify_conformance_seal(_judgment(0.5, 0.0, 0.0, "s"))


class TestFusionProvenanceEntry:

    def test_fields(self):
        entry = create_fusion_provenance_entry(OP, TS, "a" * 64, "desc", {"k": 1})
        assert entry.source_id == OP
        assert entry.timestamp == TS
        assert entry.conformance_seal == "a" * 64
        assert entry.description == "desc"
        assert entry.metadata["k"] == 1

    def test_optional_fields_omitted(self):
        entry = create_fusion_provenance_entry(OP, TS, "a" * 64)
        assert entry.to_dict() == {
            "source_id": OP,
            "timestamp": TS,
            "conformance_seal": "a" * 64,
        }
