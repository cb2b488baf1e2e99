"""
Module: srm_engines.purchase_order
Responsibility:
    Synthesize the demo purchase-order book and each order's line items.
    Orders rotate over a supplier catalogue; line items (SKU, product,
    quantity, unit price, amount) are a pure function of the order number.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Composes srm_engines.hasher; consumes SupplierProfile values.

Invariants enforced:
    - Order numbers are ``PO2025<10000 + n>`` with n = index + 1.
    - ``po_date`` is ``as_of - n days``; no clock access.
    - Each order has 1-5 lines, quantities 50-500, unit prices
      5,000-100,000 in steps of 100.
    - Amounts are Decimal, quantized half-up to 0.01.

Failure modes:
    - ValueError when orders are requested over an empty supplier list.

Usage:
    from srm_engines.purchase_order import synthesize_purchase_orders

    orders = synthesize_purchase_orders(suppliers, as_of, count=120)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from srm_engines.hasher import hash_text
from srm_engines.supplier import SupplierProfile
from srm_engines.tracer import traced_engine

CURRENCY = "CNY"
_CENT = Decimal("0.01")

PRODUCT_NAMES: tuple[str, ...] = (
    "注射用头孢曲松钠 1g*10支/盒",
    "阿莫西林胶囊 0.25g*24粒/盒",
    "甲硝唑注射液 100ml*10支/盒",
    "复方丹参滴丸 27mg*180丸/瓶",
    "板蓝根颗粒 10g*20袋/盒",
    "氨茶碱注射液 250mg*10支/盒",
    "维生素C注射液 500mg*10支/盒",
    "生理氯化钠注射液 500ml*20袋/箱",
    "葡萄糖注射液 250ml*20袋/箱",
    "碘伏消毒液 500ml*12瓶/箱",
    "一次性注射器 5ml*100支/盒",
    "医用口罩 50个/盒",
    "红霉素软膏 10g*10支/盒",
    "布洛芬缓释胶囊 0.3g*20粒/盒",
    "奥美拉唑肠溶胶囊 20mg*14粒/盒",
    "硝苯地平缓释片 30mg*7片/盒",
    "阿司匹林肠溶片 25mg*30片/盒",
    "胰岛素注射液 300IU*3ml/支",
    "肝素钠注射液 12500IU*2ml/支",
    "地塞米松注射液 5mg*10支/盒",
)


class PurchaseOrderStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    RECEIVED = "received"
    RECONCILED = "reconciled"


# Declaration order drives the status rotation.
_STATUS_CYCLE: tuple[PurchaseOrderStatus, ...] = tuple(PurchaseOrderStatus)


def _money(value: int | Decimal) -> Decimal:
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PurchaseOrderLine:
    line_no: int
    sku: str
    name: str
    qty: int
    price: Decimal

    @property
    def amount(self) -> Decimal:
        return _money(self.price * self.qty)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_no": self.line_no,
            "sku": self.sku,
            "name": self.name,
            "qty": self.qty,
            "price": str(self.price),
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class PurchaseOrder:
    """A synthetic purchase order header plus its line items."""

    po_no: str
    supplier_id: str
    supplier_name: str
    po_date: date
    amount: Decimal
    status: PurchaseOrderStatus
    currency: str = CURRENCY
    items: tuple[PurchaseOrderLine, ...] = field(default_factory=tuple)

    @property
    def line_total(self) -> Decimal:
        return _money(sum((line.amount for line in self.items), Decimal(0)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "po_no": self.po_no,
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier_name,
            "po_date": self.po_date.isoformat(),
            "currency": self.currency,
            "amount": str(self.amount),
            "status": self.status.value,
            "items": [line.to_dict() for line in self.items],
        }


def purchase_order_number(index: int) -> str:
    return f"PO2025{10000 + index + 1}"


def synthesize_order_lines(po_no: str) -> tuple[PurchaseOrderLine, ...]:
    """Line items for ``po_no``: 1-5 lines, each keyed by ``<po_no>-<n>``."""
    count = 1 + hash_text(po_no) % 5
    lines = []
    for n in range(1, count + 1):
        sku_tail = str(10000 + hash_text(f"{po_no}{n}"))[-5:]
        lines.append(
            PurchaseOrderLine(
                line_no=n,
                sku=f"SKU{sku_tail}",
                name=PRODUCT_NAMES[hash_text(f"{po_no}-{n}-name") % len(PRODUCT_NAMES)],
                qty=50 + hash_text(f"{po_no}-{n}-qty") % 451,
                price=_money(5000 + (hash_text(f"{po_no}-{n}-price") % 951) * 100),
            )
        )
    return tuple(lines)


@traced_engine("purchase_order", "1.0", fingerprint_fields=("index", "as_of"))
def synthesize_purchase_order(
    index: int,
    suppliers: Sequence[SupplierProfile],
    as_of: date,
) -> PurchaseOrder:
    """
    Purchase order number ``index`` (0-based) as of ``as_of``.

    The supplier is ``suppliers[n % len(suppliers)]``; the header amount
    is the order's budget figure and is independent of the line total.
    """
    if not suppliers:
        raise ValueError("Purchase orders need at least one supplier")

    n = index + 1
    supplier = suppliers[n % len(suppliers)]
    po_no = purchase_order_number(index)
    amount = 200000 + (n % 300) * 28888 + (hash_text(str(n)) % 100) * 10000

    return PurchaseOrder(
        po_no=po_no,
        supplier_id=supplier.id,
        supplier_name=supplier.supplier_name,
        po_date=as_of - timedelta(days=n),
        amount=_money(amount),
        status=_STATUS_CYCLE[n % len(_STATUS_CYCLE)],
        items=synthesize_order_lines(po_no),
    )


def synthesize_purchase_orders(
    suppliers: Sequence[SupplierProfile],
    as_of: date,
    count: int = 120,
) -> tuple[PurchaseOrder, ...]:
    return tuple(synthesize_purchase_order(i, suppliers, as_of) for i in range(count))
