"""
Module: srm_engines.supplier
Responsibility:
    Build complete synthetic supplier profiles from an index.  Every field
    is a pure function of the index and the as-of date, so the seeded
    supplier catalogue can be regenerated identically at any time.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Composes srm_engines.identifiers and srm_engines.contacts.

Invariants enforced:
    - ``social_credit_code`` passes ``validate_identifier``.
    - Card-style ``bank_account_no`` values pass ``is_luhn_valid``.
    - ids are ``S-<1000 + n>`` with n = index + 1, unique per index.
    - Purity: no clock access; dates derive from ``as_of``.

Failure modes:
    - ValueError for a negative index.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any

from srm_engines.contacts import contact_title, synthesize_contact_name, synthesize_phone
from srm_engines.identifiers import synthesize_account_number, synthesize_identifier
from srm_engines.tracer import traced_engine

PROVINCE = "山东省"

SUPPLIER_CITIES: tuple[str, ...] = (
    "济南市", "青岛市", "烟台市", "潍坊市", "淄博市", "泰安市", "临沂市",
    "德州市", "威海市", "日照市", "枣庄市", "聊城市", "滨州市", "菏泽市",
)

SUPPLIER_TYPES: tuple[str, ...] = ("生产厂家", "经销商", "服务商")

NAME_STEMS: tuple[str, ...] = (
    "益安", "泉泰", "泰宁", "新济", "惠民", "德康", "鲁信", "泉成", "安泰", "和康",
    "博济", "盛泉", "远景", "恒瑞", "广济", "瑞宁", "华康", "安成", "京鲁", "康泽",
)

NAME_SUFFIXES: tuple[str, ...] = (
    "医药有限公司", "医药贸易有限公司", "药业有限公司", "医疗器械有限公司", "生物科技有限公司",
)

# The first supplier is the console's showcase entity.
SHOWCASE_SUPPLIER_NAME = "枣庄和康医药有限公司"

BUSINESS_SCOPE = "药品、医疗器械批发；消杀用品；中成药、化学药制剂"


@dataclass(frozen=True)
class SupplierProfile:
    """A synthetic supplier master record."""

    id: str
    supplier_name: str
    social_credit_code: str
    supplier_type: str
    province: str
    city: str
    registered_address: str
    is_active: bool
    legal_person: str
    registered_capital: int
    business_scope: str
    contact_name: str
    contact_title: str
    contact_phone: str
    contact_email: str
    bank_name: str
    bank_branch: str
    bank_account_name: str
    bank_account_no: str
    invoice_title: str
    invoice_type: str
    tax_rate: int
    established_date: date
    rating_score: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["established_date"] = self.established_date.isoformat()
        return data


def supplier_name(index: int) -> str:
    if index == 0:
        return SHOWCASE_SUPPLIER_NAME
    city = SUPPLIER_CITIES[index % len(SUPPLIER_CITIES)].removesuffix("市")
    stem = NAME_STEMS[index % len(NAME_STEMS)]
    suffix = NAME_SUFFIXES[index % len(NAME_SUFFIXES)]
    return f"{city}{stem}{suffix}"


@traced_engine("supplier", "1.0", fingerprint_fields=("index", "as_of"))
def synthesize_supplier(
    index: int,
    as_of: date,
    region_codes: Mapping[str, str] | None = None,
) -> SupplierProfile:
    """
    Synthetic supplier number ``index`` (0-based) as of ``as_of``.

    ``region_codes`` replaces the built-in city -> region table used for
    the social credit code.
    """
    if index < 0:
        raise ValueError(f"Supplier index must be non-negative, got {index}")

    i = index
    n = i + 1
    city = SUPPLIER_CITIES[i % len(SUPPLIER_CITIES)]
    name = supplier_name(i)
    account = synthesize_account_number(n * 31 + i, city)

    return SupplierProfile(
        id=f"S-{1000 + n}",
        supplier_name=name,
        social_credit_code=synthesize_identifier(n * 123 + i, city, region_codes),
        supplier_type=SUPPLIER_TYPES[n % len(SUPPLIER_TYPES)],
        province=PROVINCE,
        city=city,
        registered_address=f"{PROVINCE}{city}历下区示例路{n}号",
        is_active=n % 7 != 0,
        legal_person=synthesize_contact_name(n * 13 + 5),
        registered_capital=1000 + (n % 50) * 100,
        business_scope=BUSINESS_SCOPE,
        contact_name=synthesize_contact_name(n * 7 + i),
        contact_title=contact_title(n + i),
        contact_phone=synthesize_phone(n * 17 + i, city),
        contact_email=f"contact{n}@corp.local",
        bank_name=account.bank_name,
        bank_branch=f"{city}分行营业部",
        bank_account_name=name,
        bank_account_no=account.account_no,
        invoice_title=name,
        invoice_type="普通发票" if n % 3 == 0 else "专用发票",
        tax_rate=6 if n % 4 == 0 else 13,
        established_date=as_of - timedelta(days=365 * ((n % 10) + 1)),
        rating_score=60 + n % 40,
    )


def synthesize_suppliers(
    count: int,
    as_of: date,
    region_codes: Mapping[str, str] | None = None,
) -> tuple[SupplierProfile, ...]:
    return tuple(synthesize_supplier(i, as_of, region_codes) for i in range(count))
