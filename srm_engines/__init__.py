"""
Module: srm_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    synthesis and scoring engines.  This is the canonical import surface
    for srm_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import srm_kernel (logging, domain values) and sibling
    engine modules.  MUST NOT import srm_services, srm_config or the
    repository.

Invariants enforced:
    - Purity: engines never read the clock; dates are passed in.
    - Determinism: identical inputs always produce identical outputs;
      there is no module-level generator state.

Failure modes:
    - ImportError if a sub-module is missing.

Usage:
    from srm_engines import synthesize_identifier, synthesize_metrics
    from srm_engines import compute_score, map_category
"""

from srm_kernel.logging_config import get_logger

logger = get_logger("engines")

from srm_engines.attributes import (
    METRIC_SPECS,
    MetricSpec,
    SyntheticMetricSet,
    synthesize_metrics,
)
from srm_engines.contacts import (
    CARRIER_POOLS,
    CITY_AREA_CODES,
    CONTACT_TITLES,
    contact_title,
    is_mobile_number,
    synthesize_contact_name,
    synthesize_phone,
)
from srm_engines.hasher import hash_text, lcg_stream, unit_random
from srm_engines.identifiers import (
    BANK_BINS,
    BANK_NAMES,
    CHECK_ALPHABET,
    CHECK_WEIGHTS,
    FALLBACK_IDENTIFIER,
    REGION_CODES,
    BankAccount,
    compute_check_char,
    is_luhn_valid,
    luhn_checksum,
    luhn_complete,
    synthesize_account_number,
    synthesize_identifier,
    validate_identifier,
)
from srm_engines.purchase_order import (
    PRODUCT_NAMES,
    PurchaseOrder,
    PurchaseOrderLine,
    PurchaseOrderStatus,
    purchase_order_number,
    synthesize_order_lines,
    synthesize_purchase_order,
    synthesize_purchase_orders,
)
from srm_engines.qualification import (
    QUALIFICATION_TYPES,
    ExpiryAssessment,
    ExpiryStatus,
    QualificationRecord,
    classify_expiry,
    sample_expiry_offset,
    synthesize_qualifications,
)
from srm_engines.scoring import (
    GradedRow,
    NormalizedMetric,
    compute_score,
    grade_row,
    map_category,
    normalize_weights,
    round2,
    tier_distribution,
)
from srm_engines.supplier import (
    SUPPLIER_CITIES,
    SupplierProfile,
    synthesize_supplier,
    synthesize_suppliers,
)
from srm_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Hasher
    "hash_text",
    "lcg_stream",
    "unit_random",
    # Identifiers
    "BANK_BINS",
    "BANK_NAMES",
    "CHECK_ALPHABET",
    "CHECK_WEIGHTS",
    "FALLBACK_IDENTIFIER",
    "REGION_CODES",
    "BankAccount",
    "compute_check_char",
    "is_luhn_valid",
    "luhn_checksum",
    "luhn_complete",
    "synthesize_account_number",
    "synthesize_identifier",
    "validate_identifier",
    # Contacts
    "CARRIER_POOLS",
    "CITY_AREA_CODES",
    "CONTACT_TITLES",
    "contact_title",
    "is_mobile_number",
    "synthesize_contact_name",
    "synthesize_phone",
    # Attributes
    "METRIC_SPECS",
    "MetricSpec",
    "SyntheticMetricSet",
    "synthesize_metrics",
    # Scoring
    "GradedRow",
    "NormalizedMetric",
    "compute_score",
    "grade_row",
    "map_category",
    "normalize_weights",
    "round2",
    "tier_distribution",
    # Qualification
    "QUALIFICATION_TYPES",
    "ExpiryAssessment",
    "ExpiryStatus",
    "QualificationRecord",
    "classify_expiry",
    "sample_expiry_offset",
    "synthesize_qualifications",
    # Purchase orders
    "PRODUCT_NAMES",
    "PurchaseOrder",
    "PurchaseOrderLine",
    "PurchaseOrderStatus",
    "purchase_order_number",
    "synthesize_order_lines",
    "synthesize_purchase_order",
    "synthesize_purchase_orders",
    # Supplier
    "SUPPLIER_CITIES",
    "SupplierProfile",
    "synthesize_supplier",
    "synthesize_suppliers",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]
