"""Tests for the deterministic hashing primitives (srm_engines/hasher.py)."""

import pytest

from srm_engines.hasher import LCG_MODULUS, hash_text, lcg_stream, unit_random


class TestHashText:
    def test_known_value(self):
        assert hash_text("a-b") == 94710

    def test_empty_string(self):
        assert hash_text("") == 0

    def test_single_cjk_code_unit(self):
        """CJK characters in the BMP hash as one UTF-16 code unit."""
        assert hash_text("中") == 0x4E2D

    def test_astral_character_uses_surrogate_pair(self):
        """Characters outside the BMP contribute two code units."""
        assert hash_text("😀") == 0xD83D * 31 + 0xDE00

    def test_non_string_seed_uses_str(self):
        assert hash_text(123) == hash_text("123")

    def test_long_input_wraps_to_32_bits(self):
        value = hash_text("统一社会信用代码" * 50)
        assert 0 <= value <= 2**31

    def test_deterministic(self):
        assert hash_text("枣庄和康医药有限公司") == hash_text("枣庄和康医药有限公司")


class TestUnitRandom:
    def test_known_value(self):
        assert unit_random("a", "b") == 0.71

    def test_range_and_resolution(self):
        for i in range(200):
            r = unit_random(i, "salt")
            assert 0 <= r < 1
            assert round(r * 1000) == pytest.approx(r * 1000)

    def test_salt_changes_sample(self):
        samples = {unit_random("S-1001", salt) for salt in ("onTime", "quality", "compliance")}
        assert len(samples) > 1


class TestLcgStream:
    def test_known_sequence(self):
        stream = lcg_stream(1)
        assert [next(stream) for _ in range(3)] == [48271, 182605794, 1291394886]

    def test_streams_are_independent(self):
        """Two streams from the same seed never share state."""
        first = lcg_stream(42)
        second = lcg_stream(42)
        a = [next(first) for _ in range(5)]
        b = [next(second) for _ in range(5)]
        assert a == b

    def test_zero_seed_is_usable(self):
        stream = lcg_stream(0)
        values = [next(stream) for _ in range(10)]
        assert all(0 < v < LCG_MODULUS for v in values)
        assert len(set(values)) == 10
