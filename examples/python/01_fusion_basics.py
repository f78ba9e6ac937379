"""
Example 01: Fusion Basics
=========================

Demonstrates how to build neutrosophic judgments, fuse them with the
three fusion operators, and inspect the provenance chain of the result.

Use case: Three price feeds report on whether an asset is fairly priced.
"""

from opentrust import (
    NeutrosophicJudgment,
    ProvenanceEntry,
    ValidationError,
    conflict_aware_weighted_average,
    optimistic_fusion,
    pessimistic_fusion,
)

# ── 1. Creating judgments ────────────────────────────────────────

print("=== 1. Creating Judgments ===\n")

feed_a = NeutrosophicJudgment(
    0.7, 0.2, 0.1,
    [ProvenanceEntry(source_id="feed-a", timestamp="2023-01-01T00:00:00Z")],
)
feed_b = NeutrosophicJudgment(
    0.9, 0.1, 0.0,
    [{"source_id": "feed-b", "timestamp": "2023-01-01T00:00:00Z"}],
)
feed_c = NeutrosophicJudgment(
    0.6, 0.4, 0.0,
    [ProvenanceEntry(
        source_id="feed-c",
        timestamp="2023-01-01T00:00:00Z",
        description="Thinly traded venue",
        metadata={"venue": "dex", "latency_ms": 420},
    )],
)

for j in (feed_a, feed_b, feed_c):
    print(f"  {j.provenance_chain[0].source_id}: {j!r}")

# T + I + F may be below 1: the remainder is unassigned mass
try:
    NeutrosophicJudgment(0.8, 0.3, 0.0, [ProvenanceEntry("bad", "2023-01-01T00:00:00Z")])
except ValidationError as exc:
    print(f"\nRejected: {exc}")

# ── 2. Conflict-aware weighted average ───────────────────────────

print("\n=== 2. Conflict-Aware Weighted Average ===\n")

judgments = [feed_a, feed_b, feed_c]
weights = [0.5, 0.3, 0.2]

fused = conflict_aware_weighted_average(judgments, weights)
print(f"Fused: {fused!r}")
print(f"Sum:   {fused.T + fused.I + fused.F:.4f}")

# ── 3. Optimistic and pessimistic fusion ─────────────────────────

print("\n=== 3. Best / Worst Case ===\n")

best = optimistic_fusion(judgments)
worst = pessimistic_fusion(judgments)
print(f"Optimistic:  {best!r}")
print(f"Pessimistic: {worst!r}")

# ── 4. Provenance of a fused judgment ────────────────────────────

print("\n=== 4. Provenance Chain ===\n")

for entry in fused.provenance_chain:
    marker = ""
    if entry.conformance_seal:
        marker = f"  seal={entry.conformance_seal[:16]}..."
    elif entry.judgment_id:
        marker = f"  id={entry.judgment_id[:16]}..."
    print(f"  {entry.source_id}{marker}")

print(f"\nJudgment id: {fused.judgment_id}")
print(f"\nAs JSON:\n{fused.to_json(indent=2)}")
