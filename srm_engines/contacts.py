"""
Module: srm_engines.contacts
Responsibility:
    Synthesize plausible contact details for a supplier: a Chinese
    personal name, a job title and a phone number (80% mobile with a real
    carrier prefix, 20% landline with the city's area code).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Mobile numbers are exactly 11 digits and start with a prefix from
      one of the three carrier pools.
    - Landlines are ``<area code>-<7 or 8 digits>``.
    - Output is a pure function of the seed (and city).

Failure modes:
    - None.  Unknown cities use the 0531 area code.
"""

from __future__ import annotations

from srm_engines.hasher import hash_text, lcg_stream
from srm_engines.tracer import traced_engine

SURNAMES = "王李张刘陈杨赵黄周吴徐孙马朱胡郭何高林罗"
GIVEN_FIRST = "伟磊敏静婷秀强丽军芳勇杰娜艳超明霞平刚玲"
GIVEN_SECOND = "华娟峰丹楠梅琳波琪莹龙凯瑞倩旭博鑫宇晨"

CONTACT_TITLES: tuple[str, ...] = ("采购经理", "商务经理", "销售代表", "渠道经理", "客户经理")

CMCC_PREFIXES: tuple[str, ...] = (
    "134", "135", "136", "137", "138", "139", "147", "148", "150", "151", "152",
    "157", "158", "159", "172", "178", "182", "183", "184", "187", "188", "198",
)
CUCC_PREFIXES: tuple[str, ...] = (
    "130", "131", "132", "145", "146", "155", "156", "166", "175", "176", "185", "186",
)
CTC_PREFIXES: tuple[str, ...] = (
    "133", "149", "153", "173", "174", "177", "180", "181", "189", "199",
)
CARRIER_POOLS: tuple[tuple[str, ...], ...] = (CMCC_PREFIXES, CUCC_PREFIXES, CTC_PREFIXES)

CITY_AREA_CODES: dict[str, str] = {
    "济南市": "0531",
    "青岛市": "0532",
    "烟台市": "0535",
    "潍坊市": "0536",
    "淄博市": "0533",
    "泰安市": "0538",
    "临沂市": "0539",
    "德州市": "0534",
    "威海市": "0631",
    "日照市": "0633",
    "枣庄市": "0632",
    "聊城市": "0635",
    "滨州市": "0543",
    "菏泽市": "0530",
}
DEFAULT_AREA_CODE = "0531"

MOBILE_SHARE = 0.8


def synthesize_contact_name(seed: int) -> str:
    """Surname plus one given-name character, or two when ``seed % 3 != 0``."""
    surname = SURNAMES[seed % len(SURNAMES)]
    first = GIVEN_FIRST[seed % len(GIVEN_FIRST)]
    second = "" if seed % 3 == 0 else GIVEN_SECOND[seed % len(GIVEN_SECOND)]
    return f"{surname}{first}{second}"


def contact_title(seed: int) -> str:
    return CONTACT_TITLES[seed % len(CONTACT_TITLES)]


def is_mobile_number(phone: str) -> bool:
    return (
        len(phone) == 11
        and phone.isdigit()
        and any(phone[:3] in pool for pool in CARRIER_POOLS)
    )


@traced_engine("phone", "1.0", fingerprint_fields=("seed", "city"))
def synthesize_phone(seed: object, city: str | None = None) -> str:
    """Deterministic mobile or landline number for a seed and city."""
    city_key = city or ""
    roll = hash_text(f"{seed}-{city_key}") % 100 / 100

    if roll < MOBILE_SHARE:
        pool = CARRIER_POOLS[hash_text(str(seed)) % len(CARRIER_POOLS)]
        prefix = pool[hash_text(f"{seed}-{city_key}") % len(pool)]
        stream = lcg_stream(hash_text(f"{prefix}-{seed}"))
        return prefix + "".join(str(next(stream) % 10) for _ in range(8))

    area_code = CITY_AREA_CODES.get(city_key, DEFAULT_AREA_CODE)
    stream = lcg_stream(hash_text(f"{seed}-land-{city_key}"))
    length = 7 + next(stream) % 2
    tail = "".join(str(next(stream) % 10) for _ in range(length))
    return f"{area_code}-{tail}"
