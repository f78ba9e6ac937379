"""Protocol constants shared across the opentrust modules."""

from __future__ import annotations

# ── Fusion operator identifiers (recorded as the fusion entry source_id) ──

CAWA_OPERATOR_ID = "otp-cawa-v1.1"
OPTIMISTIC_OPERATOR_ID = "otp-optimistic-v1.1"
PESSIMISTIC_OPERATOR_ID = "otp-pessimistic-v1.1"

# Version stamped into fusion provenance metadata
PROTOCOL_VERSION = "3.0.0"

# Implementation tag recorded by the identity generator and oracles
IMPLEMENTATION_TAG = "otp-python-v3.0"

# ── Conformance seal ──

SEAL_SEPARATOR = "::"
SEAL_GENERATION_FAILED = "seal-generation-failed"

# ── Judgment identity ──

JUDGMENT_ID_GENERATOR = "otp-judgment-id-generator"
JUDGMENT_ID_DESCRIPTION = "Automatic Judgment ID generation for Circle of Trust"
JUDGMENT_ID_PURPOSE = "circle-of-trust-tracking"

# Tolerance for floating-point drift in the T + I + F <= 1 constraint
CONSERVATION_TOL = 1e-9
