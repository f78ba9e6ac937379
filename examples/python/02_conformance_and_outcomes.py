"""
Example 02: Conformance Seals and Outcome Tracking
==================================================

Demonstrates how a fused judgment proves which inputs and operator
produced it, how tampering is detected, and how a later real-world
outcome is linked back to the original decision by its judgment id.

Use case: A lending desk fuses two risk signals, acts on the result,
and records whether the loan was repaid.
"""

from opentrust import (
    ConformanceError,
    NeutrosophicJudgment,
    OutcomeType,
    ProvenanceEntry,
    conflict_aware_weighted_average,
    create_outcome_judgment,
    verify_conformance_seal,
    verify_conformance_seal_with_inputs,
)

credit_model = NeutrosophicJudgment(
    0.8, 0.2, 0.0,
    [ProvenanceEntry(source_id="credit-model", timestamp="2023-01-01T00:00:00Z")],
)
fraud_screen = NeutrosophicJudgment(
    0.6, 0.3, 0.1,
    [ProvenanceEntry(source_id="fraud-screen", timestamp="2023-01-01T00:00:00Z")],
)

inputs = [credit_model, fraud_screen]
weights = [0.6, 0.4]
decision = conflict_aware_weighted_average(inputs, weights)

# ── 1. Verifying a seal ──────────────────────────────────────────

print("=== 1. Verifying the Seal ===\n")

print(f"Decision: {decision!r}")
print(f"Verified: {verify_conformance_seal_with_inputs(decision, inputs, weights)}")

# Input order does not matter
print(f"Reversed: {verify_conformance_seal_with_inputs(decision, inputs[::-1], weights[::-1])}")

# ── 2. Detecting tampering ───────────────────────────────────────

print("\n=== 2. Tampering ===\n")

forged_input = NeutrosophicJudgment(
    0.95, 0.05, 0.0,
    [ProvenanceEntry(source_id="credit-model", timestamp="2023-01-01T00:00:00Z")],
)
print(f"Forged input:   {verify_conformance_seal_with_inputs(decision, [forged_input, fraud_screen], weights)}")
print(f"Forged weights: {verify_conformance_seal_with_inputs(decision, inputs, [0.9, 0.1])}")

# A seal cannot be checked without the inputs it was computed over
try:
    verify_conformance_seal(decision)
except ConformanceError as exc:
    print(f"Without inputs: {exc.code}")

# ── 3. Linking an outcome ────────────────────────────────────────

print("\n=== 3. Outcome Tracking ===\n")

print(f"Decision id: {decision.judgment_id}")

outcome = create_outcome_judgment(
    links_to_judgment_id=decision.judgment_id,
    t=1.0, i=0.0, f=0.0,
    outcome_type=OutcomeType.SUCCESS,
    oracle_source="loan-servicing-oracle",
)
print(f"Outcome id:  {outcome.judgment_id}")
print(f"Links to:    {outcome.links_to_judgment_id}")
print(f"Outcome:     {outcome.outcome_type.value} (T={outcome.T}, I={outcome.I}, F={outcome.F})")
