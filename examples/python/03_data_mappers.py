"""
Example 03: Data Mappers
========================

Demonstrates how numerical, categorical and boolean mappers turn raw
data into judgments, how mapper configurations are validated and kept
in a registry, and how mapped judgments feed into fusion.

Use case: A DeFi risk engine scores a lending position from its health
factor, the borrower's KYC status and an oracle liveness flag.
"""

from opentrust import (
    BooleanMapper,
    CategoricalMapper,
    CategoricalParams,
    InputError,
    MapperRegistry,
    MapperValidator,
    NumericalMapper,
    NumericalParams,
    conflict_aware_weighted_average,
)

# ── 1. Numerical mapper ──────────────────────────────────────────

print("=== 1. Numerical Mapper ===\n")

health = NumericalMapper(NumericalParams(
    id="defi-health-factor",
    version="1.0.0",
    falsity_point=1.0,        # liquidation
    indeterminacy_point=1.5,  # warning zone
    truth_point=3.0,          # safe
))

for value in (0.8, 1.2, 1.5, 2.25, 5.0):
    print(f"  health factor {value}: {health.apply(value)!r}")

# ── 2. Categorical mapper ────────────────────────────────────────

print("\n=== 2. Categorical Mapper ===\n")

kyc = CategoricalMapper(CategoricalParams(
    id="kyc-status",
    version="1.0.0",
    mappings={
        "VERIFIED": {"T": 1.0, "I": 0.0, "F": 0.0},
        "PENDING": {"T": 0.0, "I": 1.0, "F": 0.0},
        "REJECTED": {"T": 0.0, "I": 0.0, "F": 1.0},
    },
))

print(f"  VERIFIED: {kyc.apply('VERIFIED')!r}")
try:
    kyc.apply("SUSPENDED")
except InputError as exc:
    print(f"  SUSPENDED: {exc}")

# ── 3. Boolean mapper ────────────────────────────────────────────

print("\n=== 3. Boolean Mapper ===\n")

oracle_live = BooleanMapper.security("oracle-liveness")
for raw in (True, "yes", 0, "disabled"):
    print(f"  {raw!r}: {oracle_live.apply(raw)!r}")

# ── 4. Registry and validation ───────────────────────────────────

print("\n=== 4. Registry ===\n")

registry = MapperRegistry([health, kyc, oracle_live])
print(f"Registered: {registry.list()}")
print(f"Stats:      {registry.stats()}")

config = {
    "type": "numerical",
    "id": "oracle-latency",
    "version": "1.0.0",
    "falsity_point": 500,
    "indeterminacy_point": 200,
    "truth_point": 50,
}
validator = MapperValidator()
registry.register(validator.create_mapper(config))
print(f"After import: {registry.list()}")

# ── 5. Mapped judgments into fusion ──────────────────────────────

print("\n=== 5. Fusion ===\n")

position = [
    registry.get("defi-health-factor").apply(2.1),
    registry.get("kyc-status").apply("VERIFIED"),
    registry.get("oracle-liveness").apply(True),
    registry.get("oracle-latency").apply(120),
]
fused = conflict_aware_weighted_average(position, [0.4, 0.2, 0.2, 0.2])
print(f"Position risk: {fused!r}")
