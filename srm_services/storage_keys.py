"""Repository collection and document keys used by the SRM services."""

SRM_COLLECTION = "srm"

SUPPLIERS_KEY = "srm_suppliers"
SUPPLIER_BASE_KEY = "srm_supplier_base"
CATEGORY_RULES_KEY = "srm_category_rules"
PREPROCESS_LAST_KEY = "srm_preprocess_last"
PURCHASE_ORDERS_KEY = "srm_pos"
SEEDED_FLAG_KEY = "srm_seeded_v6"

DEFAULT_QUALIFICATION_OWNER = "DEFAULT"


def qualifications_key(supplier_id: str | None) -> str:
    return f"srm_qualifications_{supplier_id or DEFAULT_QUALIFICATION_OWNER}"
