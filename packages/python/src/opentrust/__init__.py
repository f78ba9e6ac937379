"""
opentrust: Neutrosophic Judgments with auditable fusion.

Python implementation of the OpenTrust Protocol core: the (T, I, F)
judgment type with its provenance chain, deterministic fusion operators,
conformance seals that prove a fusion followed the protocol, and
content-addressed judgment ids that link decisions to outcomes.
"""

__version__ = "3.0.0"

from opentrust.errors import (
    ConformanceError,
    InputError,
    MapperError,
    OpenTrustError,
    ValidationError,
)
from opentrust.judgment import NeutrosophicJudgment, ProvenanceEntry
from opentrust.canonical import canonical_json, sha256_hex
from opentrust.conformance import (
    create_fusion_provenance_entry,
    generate_conformance_seal,
    verify_conformance_seal,
    verify_conformance_seal_with_inputs,
)
from opentrust.judgment_id import (
    OutcomeJudgment,
    OutcomeType,
    create_outcome_judgment,
    ensure_judgment_id,
    generate_judgment_id,
    get_judgment_id,
    outcome_judgment_to_neutrosophic,
)
from opentrust.fusion import (
    conflict_aware_weighted_average,
    optimistic_fusion,
    pessimistic_fusion,
)
from opentrust.mapper import (
    BooleanMapper,
    BooleanParams,
    CategoricalMapper,
    CategoricalParams,
    MapperRegistry,
    MapperType,
    MapperValidator,
    NumericalMapper,
    NumericalParams,
)

__all__ = [
    "__version__",
    # Errors
    "OpenTrustError",
    "ValidationError",
    "ConformanceError",
    "InputError",
    "MapperError",
    # Judgment
    "NeutrosophicJudgment",
    "ProvenanceEntry",
    "canonical_json",
    "sha256_hex",
    # Conformance
    "generate_conformance_seal",
    "verify_conformance_seal",
    "verify_conformance_seal_with_inputs",
    "create_fusion_provenance_entry",
    # Identity
    "generate_judgment_id",
    "ensure_judgment_id",
    "get_judgment_id",
    "OutcomeType",
    "OutcomeJudgment",
    "create_outcome_judgment",
    "outcome_judgment_to_neutrosophic",
    # Fusion
    "conflict_aware_weighted_average",
    "optimistic_fusion",
    "pessimistic_fusion",
    # Mappers
    "MapperType",
    "NumericalParams",
    "CategoricalParams",
    "BooleanParams",
    "NumericalMapper",
    "CategoricalMapper",
    "BooleanMapper",
    "MapperRegistry",
    "MapperValidator",
]
