"""
Module: srm_engines.identifiers
Responsibility:
    Synthesize checksum-valid business identifiers and payment account
    numbers from a stable seed:

    - Unified registration identifier (18 chars):
      ``[reg dept '9'][org type '1'][region code:6][main code:9][check:1]``
      with the weighted modulo-31 check character.
    - Payment account number: 70% card-style (bank BIN + LCG digits,
      16 or 19 digits, Luhn-completed), 30% corporate (12-16 LCG digits,
      no checksum).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import srm_engines.hasher, srm_engines.tracer and
    srm_kernel.logging_config.

Invariants enforced:
    - Every identifier returned by ``synthesize_identifier`` passes
      ``validate_identifier``; this includes ``FALLBACK_IDENTIFIER``.
    - Every card-style account number passes ``is_luhn_valid``.
    - The main code is nine base-36 characters so that the prefix is
      exactly 17 characters (1 + 1 + 6 + 9).
    - The check index is ``(31 - sum % 31) % 31``: a weighted sum
      divisible by 31 yields ``"0"`` as in GB 32100, never an index past
      the end of ``CHECK_ALPHABET``.
    - Output is a pure function of (seed, city[, region table]).

Failure modes:
    - A region table entry that is not a 6-character code (only possible
      with a caller-supplied table) cannot yield a 17-character prefix;
      the synthesizer logs ``identifier_fallback`` and returns
      ``FALLBACK_IDENTIFIER`` instead of raising.
    - ``luhn_checksum`` raises ValueError for non-digit input.

Usage:
    from srm_engines.identifiers import synthesize_identifier, validate_identifier

    code = synthesize_identifier(123, "济南市")
    assert validate_identifier(code)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from srm_engines.hasher import hash_text, lcg_stream, unit_random
from srm_engines.tracer import traced_engine
from srm_kernel.logging_config import get_logger

logger = get_logger("engines.identifiers")


# =============================================================================
# Unified registration identifier
# =============================================================================

REG_DEPT = "9"  # market supervision administration
ORG_TYPE = "1"  # enterprise
DEFAULT_REGION_CODE = "370100"

# Shandong prefecture cities -> administrative division code.
REGION_CODES: dict[str, str] = {
    "济南市": "370100",
    "青岛市": "370200",
    "淄博市": "370300",
    "枣庄市": "370400",
    "东营市": "370500",
    "烟台市": "370600",
    "潍坊市": "370700",
    "济宁市": "370800",
    "泰安市": "370900",
    "威海市": "371000",
    "日照市": "371100",
    "临沂市": "371300",
    "德州市": "371400",
    "聊城市": "371500",
    "滨州市": "371600",
    "菏泽市": "371700",
}

CHECK_WEIGHTS: tuple[int, ...] = (1, 3, 9, 27, 19, 26, 16, 17, 20, 29, 25, 13, 8, 24, 10, 30, 28)

# No I, O, S, V, Z.
CHECK_ALPHABET = "0123456789ABCDEFGHJKLMNPQRTUWXY"

MAIN_CODE_LENGTH = 9
PREFIX_LENGTH = 17
IDENTIFIER_LENGTH = 18

# Known-valid placeholder returned on structural failure.
FALLBACK_IDENTIFIER = "91370100MA3K2B4C50"

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _char_value(ch: str) -> int | None:
    if "0" <= ch <= "9":
        return ord(ch) - ord("0")
    if "A" <= ch <= "Z":
        return ord(ch) - ord("A") + 10
    return None


def compute_check_char(prefix17: str) -> str | None:
    """
    Check character for a 17-character identifier prefix.

    Returns None when the prefix has the wrong length or contains a
    character outside ``0-9A-Z``.
    """
    if len(prefix17) != PREFIX_LENGTH:
        return None
    total = 0
    for ch, weight in zip(prefix17, CHECK_WEIGHTS):
        value = _char_value(ch)
        if value is None:
            return None
        total += value * weight
    return CHECK_ALPHABET[(31 - total % 31) % 31]


def validate_identifier(code: Any) -> bool:
    """True if ``code`` is 18 characters and its check character matches."""
    if not isinstance(code, str) or len(code) != IDENTIFIER_LENGTH:
        return False
    return compute_check_char(code[:PREFIX_LENGTH]) == code[-1]


def _main_code(seed: object) -> str:
    return "".join(
        _BASE36[int(unit_random(seed, f"main-{i}") * 36)]
        for i in range(MAIN_CODE_LENGTH)
    )


@traced_engine("identifier", "1.0", fingerprint_fields=("seed", "city"))
def synthesize_identifier(
    seed: object,
    city: str | None = None,
    region_codes: Mapping[str, str] | None = None,
) -> str:
    """
    Deterministic, checksum-valid 18-character unified registration identifier.

    Args:
        seed: Stable seed (entity id, index-derived integer, ...).
        city: City name with the 市 suffix; unknown cities use 370100.
        region_codes: Optional city -> region code table overriding
            ``REGION_CODES``.

    Returns:
        The identifier, or ``FALLBACK_IDENTIFIER`` when the prefix cannot
        be built from the region table.
    """
    table = REGION_CODES if region_codes is None else region_codes
    region = table.get(city or "", DEFAULT_REGION_CODE)
    prefix = f"{REG_DEPT}{ORG_TYPE}{region}{_main_code(seed)}"

    check = compute_check_char(prefix)
    if check is None:
        logger.warning(
            "identifier_fallback",
            extra={
                "seed": str(seed),
                "city": city,
                "region_code": region,
                "prefix_length": len(prefix),
            },
        )
        return FALLBACK_IDENTIFIER

    return prefix + check


# =============================================================================
# Payment account number
# =============================================================================

# Bank -> card BINs.  Declaration order matters: bank choice indexes it.
BANK_BINS: dict[str, tuple[str, ...]] = {
    "中国银行": ("621661", "621660", "621663"),
    "工商银行": ("622202", "622208", "621226"),
    "建设银行": ("621700", "621284", "623668"),
    "农业银行": ("622848", "621282", "621336"),
    "交通银行": ("622260", "621069"),
    "招商银行": ("622588", "621486"),
    "中信银行": ("622696", "622690"),
    "光大银行": ("622666", "621003"),
    "民生银行": ("622622", "622600"),
    "浦发银行": ("622521", "621792"),
}
BANK_NAMES: tuple[str, ...] = tuple(BANK_BINS)

CARD_STYLE_PROBABILITY = 0.7


@dataclass(frozen=True)
class BankAccount:
    """Synthesized bank name plus account number."""

    bank_name: str
    account_no: str
    card_style: bool

    def to_dict(self) -> dict[str, str]:
        return {"bank_name": self.bank_name, "account_no": self.account_no}


def luhn_checksum(number: str) -> int:
    """Luhn sum mod 10; 0 means valid.  Raises ValueError on non-digits."""
    total = 0
    for i, ch in enumerate(reversed(number)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10


def luhn_complete(body: str) -> str:
    """Append the digit that makes ``body`` Luhn-valid."""
    for d in range(10):
        candidate = f"{body}{d}"
        if luhn_checksum(candidate) == 0:
            return candidate
    # Unreachable: one of ten digits always closes the sum.
    return f"{body}0"


def is_luhn_valid(number: Any) -> bool:
    if not isinstance(number, str) or not number.isascii() or not number.isdigit():
        return False
    return luhn_checksum(number) == 0


def _digits(stream, count: int) -> str:
    return "".join(str(next(stream) % 10) for _ in range(count))


@traced_engine("account_number", "1.0", fingerprint_fields=("seed", "city"))
def synthesize_account_number(seed: object, city: str | None = None) -> BankAccount:
    """
    Deterministic bank name and account number for a seed.

    The card/corporate roll, bank, BIN, length and digits depend on the
    seed only; ``city`` is accepted for call-site symmetry with
    ``synthesize_identifier``.
    """
    card_style = unit_random(seed, "acctType") < CARD_STYLE_PROBABILITY
    bank = BANK_NAMES[hash_text(f"bankName-{seed}") % len(BANK_NAMES)]

    if card_style:
        bins = BANK_BINS[bank]
        bin_ = bins[hash_text(f"bin-{seed}") % len(bins)]
        length = 16 + (hash_text(f"len-{seed}") % 2) * 3
        stream = lcg_stream(hash_text(f"acct-{seed}"))
        body = bin_ + _digits(stream, length - 1 - len(bin_))
        return BankAccount(bank_name=bank, account_no=luhn_complete(body), card_style=True)

    stream = lcg_stream(hash_text(f"corp-{seed}"))
    length = 12 + next(stream) % 5
    return BankAccount(bank_name=bank, account_no=_digits(stream, length), card_style=False)
