"""Tests for synthetic supplier profiles (srm_engines/supplier.py)."""

from datetime import date, timedelta

import pytest

from srm_engines.identifiers import (
    BANK_NAMES,
    REGION_CODES,
    is_luhn_valid,
    synthesize_account_number,
    validate_identifier,
)
from srm_engines.supplier import (
    PROVINCE,
    SHOWCASE_SUPPLIER_NAME,
    SUPPLIER_CITIES,
    SUPPLIER_TYPES,
    supplier_name,
    synthesize_supplier,
    synthesize_suppliers,
)

AS_OF = date(2025, 6, 30)


class TestSupplierName:
    def test_first_supplier_is_showcase(self):
        assert supplier_name(0) == SHOWCASE_SUPPLIER_NAME

    def test_name_starts_with_city(self):
        assert supplier_name(1).startswith(SUPPLIER_CITIES[1].removesuffix("市"))


class TestSynthesizeSupplier:
    """Tests for synthesize_supplier."""

    def test_first_supplier(self):
        profile = synthesize_supplier(0, AS_OF)

        assert profile.id == "S-1001"
        assert profile.supplier_name == SHOWCASE_SUPPLIER_NAME
        assert profile.city == SUPPLIER_CITIES[0]
        assert profile.province == PROVINCE
        assert profile.supplier_type == SUPPLIER_TYPES[1]
        assert profile.is_active
        assert profile.contact_email == "contact1@corp.local"
        assert profile.rating_score == 61
        assert profile.tax_rate == 13
        assert profile.established_date == AS_OF - timedelta(days=365 * 2)

    def test_every_seventh_inactive(self):
        assert not synthesize_supplier(6, AS_OF).is_active
        assert synthesize_supplier(7, AS_OF).is_active

    def test_identifiers_are_valid(self):
        for profile in synthesize_suppliers(40, AS_OF):
            assert validate_identifier(profile.social_credit_code)
            assert profile.social_credit_code[2:8] == REGION_CODES[profile.city]

    def test_bank_details(self):
        for profile in synthesize_suppliers(40, AS_OF):
            assert profile.bank_name in BANK_NAMES
            assert profile.bank_branch == f"{profile.city}分行营业部"
            assert profile.bank_account_name == profile.supplier_name
            if len(profile.bank_account_no) in (16, 19):
                assert profile.bank_account_no.isdigit()

    def test_card_accounts_are_luhn_valid(self):
        for i in range(40):
            n = i + 1
            account = synthesize_account_number(n * 31 + i, SUPPLIER_CITIES[i % len(SUPPLIER_CITIES)])
            profile = synthesize_supplier(i, AS_OF)
            assert profile.bank_account_no == account.account_no
            if account.card_style:
                assert is_luhn_valid(profile.bank_account_no)

    def test_region_override(self):
        profile = synthesize_supplier(0, AS_OF, {"济南市": "370102"})
        assert profile.social_credit_code[2:8] == "370102"

    def test_unique_ids(self):
        suppliers = synthesize_suppliers(80, AS_OF)
        assert len({s.id for s in suppliers}) == 80
        assert len({s.social_credit_code for s in suppliers}) == 77

    def test_deterministic(self):
        assert synthesize_supplier(12, AS_OF) == synthesize_supplier(12, AS_OF)

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            synthesize_supplier(-1, AS_OF)

    def test_to_dict(self):
        data = synthesize_supplier(0, AS_OF).to_dict()
        assert data["established_date"] == (AS_OF - timedelta(days=730)).isoformat()
        assert data["id"] == "S-1001"
        assert len(data) == 24
