"""
Deterministic demo import table.

Uses the standard template headers and deliberately dirty values
(trailing spaces on names, lower-cased credit codes) so every cleansing
step has something to do.
"""

from __future__ import annotations

from typing import Any

from srm_kernel.domain.values import SYSTEM_FIELD_LABELS, SystemField

TEMPLATE_HEADERS: tuple[str, ...] = tuple(SYSTEM_FIELD_LABELS[f] for f in SystemField)

_DEMO_BANKS = ("中国银行", "工商银行", "建设银行", "农业银行", "交通银行", "招商银行")
_DEMO_CITIES = ("济南", "青岛", "烟台", "潍坊", "淄博", "泰安", "临沂", "德州", "威海", "日照")
_DEMO_STEMS = ("康泽", "益安", "泉泰", "泰宁", "广济", "华康")
_DEMO_GIVEN = ("伟", "磊", "敏", "静", "丽", "军")


def template_table() -> list[list[str]]:
    """Blank import template: the header row only."""
    return [list(TEMPLATE_HEADERS)]


def generate_demo_table(count: int = 300) -> list[list[Any]]:
    """Header-first table of ``count`` demo supplier rows."""
    table: list[list[Any]] = [list(TEMPLATE_HEADERS)]
    for i in range(count):
        n = i + 1
        city = _DEMO_CITIES[i % len(_DEMO_CITIES)]
        name = f"{city}{_DEMO_STEMS[i % len(_DEMO_STEMS)]}医药有限公司"
        credit = f"9137{str(10**17 + n)[-14:]}{chr(65 + n % 26)}".lower()
        table.append([
            f"{name}  ",
            credit,
            f"张{_DEMO_GIVEN[i % len(_DEMO_GIVEN)]}",
            f"13{i % 9 + 1}{str(10_000_000 + n)[-8:]}",
            f"sales{n}@example.com",
            _DEMO_BANKS[i % len(_DEMO_BANKS)],
            f"{city}分行营业部",
            name,
            f"{6216 + i % 9}{str(10**15 + n)[-16:]}",
            name,
        ])
    return table
