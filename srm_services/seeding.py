"""
srm_services.seeding -- One-time demo catalogue for an empty repository.

Responsibility:
    Write the synthetic supplier catalogue, the showcase supplier base
    record, per-supplier qualification ledgers, the purchase-order book
    and the default grading rule, then set the seeded flag.

Architecture position:
    Services -- orchestration over srm_engines and srm_config.

Invariants enforced:
    - Idempotent: when the seeded flag is set, nothing is written.
    - The seeded flag is written last, so an interrupted run is retried
      in full.
    - Every seeded value is a pure function of ``as_of`` and the config.

Failure modes:
    - RepositoryValueError propagates from writes.
    - Configuration errors propagate from ``get_active_config`` when no
      config is passed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from srm_config import get_active_config
from srm_config.schema import SrmConfig
from srm_engines.identifiers import REGION_CODES, synthesize_identifier
from srm_engines.purchase_order import synthesize_purchase_orders
from srm_engines.qualification import synthesize_qualifications
from srm_engines.supplier import SHOWCASE_SUPPLIER_NAME, synthesize_suppliers
from srm_kernel.logging_config import LogContext, get_logger
from srm_kernel.repository import RepositoryGateway
from srm_services.qualifications import QualificationLedger
from srm_services.storage_keys import (
    CATEGORY_RULES_KEY,
    DEFAULT_QUALIFICATION_OWNER,
    PURCHASE_ORDERS_KEY,
    SEEDED_FLAG_KEY,
    SRM_COLLECTION,
    SUPPLIER_BASE_KEY,
    SUPPLIERS_KEY,
)

logger = get_logger("services.seeding")


@dataclass(frozen=True)
class SeedSummary:
    seeded: bool
    supplier_count: int = 0
    qualification_count: int = 0
    purchase_order_count: int = 0


def _showcase_base_record() -> dict:
    return {
        "supplier_name": SHOWCASE_SUPPLIER_NAME,
        "social_credit_code": synthesize_identifier(999, "枣庄市"),
        "supplier_type": "经销商",
        "registered_address": "山东省济南市历下区示例路100号",
        "is_active": True,
    }


def seed_repository(
    repository: RepositoryGateway,
    as_of: date,
    config: SrmConfig | None = None,
) -> SeedSummary:
    """
    Seed ``repository`` once.

    Args:
        repository: Target gateway.
        as_of: Reference date for established, issue and expiry dates.
        config: Seeding sizes, default rule and region overrides;
            defaults to ``get_active_config()``.

    Returns:
        SeedSummary; ``seeded`` is False when the flag was already set.
    """
    if repository.get(SRM_COLLECTION, SEEDED_FLAG_KEY, default=False):
        logger.info("repository_already_seeded")
        return SeedSummary(seeded=False)

    if config is None:
        config = get_active_config()
    seeding = config.seeding
    overrides = config.region_table()
    region_codes = {**REGION_CODES, **overrides} if overrides else None

    with LogContext.bind(batch_id=f"seed-{as_of.isoformat()}"):
        suppliers = synthesize_suppliers(seeding.supplier_count, as_of, region_codes)
        repository.put(SRM_COLLECTION, SUPPLIERS_KEY, [s.to_dict() for s in suppliers])
        repository.put(SRM_COLLECTION, SUPPLIER_BASE_KEY, _showcase_base_record())

        ledger = QualificationLedger(repository)
        qualification_count = 0
        for idx, supplier in enumerate(suppliers[: seeding.qualified_supplier_count]):
            records = synthesize_qualifications(
                supplier.id, seeding.qualification_count(idx), as_of
            )
            ledger.save(supplier.id, records)
            qualification_count += len(records)

        defaults = synthesize_qualifications(
            DEFAULT_QUALIFICATION_OWNER, seeding.default_qualification_count, as_of
        )
        ledger.save(None, defaults)
        qualification_count += len(defaults)

        orders = (
            synthesize_purchase_orders(suppliers, as_of, seeding.purchase_order_count)
            if suppliers
            else ()
        )
        repository.put(SRM_COLLECTION, PURCHASE_ORDERS_KEY, [o.to_dict() for o in orders])

        repository.put(SRM_COLLECTION, CATEGORY_RULES_KEY, config.grading_rule.to_dict())
        repository.put(SRM_COLLECTION, SEEDED_FLAG_KEY, True)

        logger.info(
            "repository_seeded",
            extra={
                "supplier_count": len(suppliers),
                "qualification_count": qualification_count,
                "purchase_order_count": len(orders),
                "config_checksum": config.checksum,
            },
        )

    return SeedSummary(
        seeded=True,
        supplier_count=len(suppliers),
        qualification_count=qualification_count,
        purchase_order_count=len(orders),
    )
