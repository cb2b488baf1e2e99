"""
Module: srm_engines.hasher
Responsibility:
    Deterministic string hashing and seeded pseudo-random primitives.
    Every synthetic value in the engine layer is derived from these three
    functions, which is what lets synthetic data regenerate identically
    across sessions without being stored.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Leaf module: imports
    nothing from the rest of the project.

Invariants enforced:
    - ``hash_text`` is the 31-polynomial over UTF-16 code units with
      32-bit signed wrap-around; the result is its absolute value, so it
      lies in [0, 2**31].
    - ``unit_random(seed, salt)`` is a pure function of ``str(seed)`` and
      ``str(salt)`` with a resolution of 1/1000.
    - ``lcg_stream`` holds its state in the generator object only; there
      is no module-level generator.

Failure modes:
    - None.  Any object is accepted as seed/salt via ``str()``.

Usage:
    from srm_engines.hasher import hash_text, lcg_stream, unit_random

    hash_text("a-b")            # 94710
    unit_random("a", "b")       # 0.71
    stream = lcg_stream(1)
    next(stream)                # 48271
"""

from __future__ import annotations

from collections.abc import Iterator

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000

LCG_MULTIPLIER = 48271
LCG_MODULUS = 2147483647  # 2**31 - 1


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - 0x100000000 if value & _INT32_SIGN else value


def _utf16_units(text: str) -> Iterator[int]:
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_text(text: object) -> int:
    """Polynomial (base 31) hash over UTF-16 code units, 32-bit wrapped, absolute value."""
    h = 0
    for unit in _utf16_units(str(text)):
        h = _to_int32(h * 31 + unit)
    return abs(h)


def unit_random(seed: object, salt: object) -> float:
    """
    Deterministic sample in [0, 1) for a (seed, salt) pair.

    Equal pairs always give equal samples; different salts on the same
    seed give independent-looking samples.
    """
    return hash_text(f"{seed}-{salt}") % 1000 / 1000


def lcg_stream(seed: int) -> Iterator[int]:
    """
    Park-Miller generator (multiplier 48271, modulus 2**31 - 1).

    Yields successive states, each in [1, 2**31 - 2].  Build a fresh
    stream per synthesis task; streams never share state.
    """
    x = seed % LCG_MODULUS
    if x <= 0:
        x += LCG_MODULUS - 1
    while True:
        x = x * LCG_MULTIPLIER % LCG_MODULUS
        yield x
