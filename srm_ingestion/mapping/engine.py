"""
Mapping engine: header auto-mapping and row materialization.

Pure transformation from a raw header row plus data rows to canonical
records keyed by system field. ZERO I/O.

Auto-mapping scans each lower-cased header against HEADER_RULES in order;
the first matching rule wins and unmatched headers map to nothing. The
result is advisory: callers override it per header before
materialization.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from srm_ingestion.domain.types import HeaderRule, ImportFieldMapping
from srm_kernel.domain.values import SystemField


# -----------------------------------------------------------------------------
# Rule table (priority order)
# -----------------------------------------------------------------------------

_CONTACT = ("联系人", "contact")

HEADER_RULES: tuple[HeaderRule, ...] = (
    HeaderRule(
        SystemField.SUPPLIER_NAME.value,
        all_of=(("名称", "supplier name", "company name", "vendor name", "name"),),
        none_of=(
            "账户", "account", "联系人", "contact",
            "银行", "开户", "bank", "发票", "抬头", "invoice",
        ),
    ),
    HeaderRule(
        SystemField.SOCIAL_CREDIT_CODE.value,
        all_of=(("信用", "统一", "税号", "credit", "tax"),),
    ),
    HeaderRule(
        SystemField.CONTACT_PHONE.value,
        all_of=(_CONTACT, ("手", "电话", "mobile", "phone", "tel")),
    ),
    HeaderRule(
        SystemField.CONTACT_EMAIL.value,
        all_of=(_CONTACT, ("邮", "email", "mail")),
    ),
    HeaderRule(
        SystemField.CONTACT_NAME.value,
        all_of=(_CONTACT,),
    ),
    HeaderRule(
        SystemField.BANK_BRANCH.value,
        all_of=(("开户", "银行", "bank"), ("支", "branch")),
    ),
    HeaderRule(
        SystemField.BANK_NAME.value,
        all_of=(("开户", "银行", "bank"),),
        none_of=("账号", "账户", "account", "acct"),
    ),
    HeaderRule(
        SystemField.BANK_ACCOUNT_NAME.value,
        all_of=(("账户名", "account name"),),
    ),
    HeaderRule(
        SystemField.BANK_ACCOUNT_NO.value,
        all_of=(("账号", "account no", "account number", "acct"),),
    ),
    HeaderRule(
        SystemField.INVOICE_TITLE.value,
        all_of=(("发票", "抬头", "invoice"),),
    ),
)


# -----------------------------------------------------------------------------
# Auto mapping
# -----------------------------------------------------------------------------


def header_text(header: Any) -> str:
    """Header cell as text; ``None`` becomes ``""``."""
    return "" if header is None else str(header)


def match_header(
    header: Any,
    rules: Sequence[HeaderRule] = HEADER_RULES,
) -> str | None:
    """System field of the first rule matching ``header``, or None."""
    name = header_text(header).strip().lower()
    if not name:
        return None
    for rule in rules:
        if rule.matches(name):
            return rule.field
    return None


def auto_map_headers(
    headers: Iterable[Any],
    rules: Sequence[HeaderRule] = HEADER_RULES,
) -> ImportFieldMapping:
    """Suggested mapping for every distinct header, in header order."""
    entries: list[tuple[str, str | None]] = []
    seen: set[str] = set()
    for header in headers:
        text = header_text(header)
        if text in seen:
            continue
        seen.add(text)
        entries.append((text, match_header(text, rules)))
    return ImportFieldMapping(entries=tuple(entries))


# -----------------------------------------------------------------------------
# Materialization
# -----------------------------------------------------------------------------


def _cell(row: Sequence[Any] | Mapping[str, Any], position: int, header: str) -> Any:
    if isinstance(row, Mapping):
        value = row.get(header)
    else:
        value = row[position] if position < len(row) else None
    return "" if value is None else value


def materialize_row(
    headers: Sequence[str],
    row: Sequence[Any] | Mapping[str, Any],
    mapping: ImportFieldMapping,
) -> dict[str, Any]:
    """
    Canonical record for one raw row.

    Headers are applied in order, so a later header mapped to the same
    field overwrites an earlier one. Unmapped headers are dropped.
    """
    record: dict[str, Any] = {}
    for position, header in enumerate(headers):
        target = mapping.get(header)
        if target:
            record[target] = _cell(row, position, header)
    return record


def materialize_rows(
    headers: Sequence[str],
    rows: Iterable[Sequence[Any] | Mapping[str, Any]],
    mapping: ImportFieldMapping,
) -> list[dict[str, Any]]:
    return [materialize_row(headers, row, mapping) for row in rows]
