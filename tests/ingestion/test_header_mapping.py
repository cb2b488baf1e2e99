"""Tests for header auto-mapping and row materialization (srm_ingestion/mapping)."""

import pytest

from srm_ingestion.demo import TEMPLATE_HEADERS
from srm_ingestion.domain.types import ImportFieldMapping
from srm_ingestion.mapping.engine import (
    HEADER_RULES,
    auto_map_headers,
    match_header,
    materialize_row,
    materialize_rows,
)
from srm_kernel.domain.values import SYSTEM_FIELDS


class TestMatchHeader:
    """Keyword rule table, first match wins."""

    def test_standard_template_maps_every_column(self):
        mapping = auto_map_headers(TEMPLATE_HEADERS)
        assert [mapping.get(h) for h in TEMPLATE_HEADERS] == list(SYSTEM_FIELDS)

    @pytest.mark.parametrize(
        ("header", "field"),
        [
            ("Supplier Name", "supplier_name"),
            ("Company Name", "supplier_name"),
            ("Tax ID", "social_credit_code"),
            ("Credit Code", "social_credit_code"),
            ("Contact", "contact_name"),
            ("Contact Phone", "contact_phone"),
            ("Contact Mobile", "contact_phone"),
            ("Contact Email", "contact_email"),
            ("Bank", "bank_name"),
            ("Bank Branch", "bank_branch"),
            ("Bank Account Name", "bank_account_name"),
            ("Account Number", "bank_account_no"),
            ("Invoice Title", "invoice_title"),
        ],
    )
    def test_english_headers(self, header, field):
        assert match_header(header) == field

    @pytest.mark.parametrize(
        ("header", "field"),
        [
            ("企业名称", "supplier_name"),
            ("纳税人识别号/税号", "social_credit_code"),
            ("联系人电话", "contact_phone"),
            ("联系人", "contact_name"),
            ("银行名称", "bank_name"),
            ("开户行支行", "bank_branch"),
            ("开户账号", "bank_account_no"),
            ("发票抬头名称", "invoice_title"),
        ],
    )
    def test_chinese_variants(self, header, field):
        assert match_header(header) == field

    def test_case_and_whitespace_insensitive(self):
        assert match_header("  SUPPLIER NAME  ") == "supplier_name"

    def test_unmatched_header(self):
        assert match_header("备注") is None
        assert match_header("") is None
        assert match_header(None) is None

    def test_email_without_contact_is_unmapped(self):
        """E-mail and phone rules require the contact keyword."""
        assert match_header("Email") is None

    def test_rule_order_is_priority(self):
        fields = [rule.field for rule in HEADER_RULES]
        assert fields.index("contact_phone") < fields.index("contact_name")
        assert fields.index("bank_branch") < fields.index("bank_name")


class TestAutoMapHeaders:
    def test_duplicate_headers_mapped_once(self):
        mapping = auto_map_headers(["供应商名称", "供应商名称", "备注"])
        assert mapping.entries == (("供应商名称", "supplier_name"), ("备注", None))

    def test_none_header_becomes_empty(self):
        mapping = auto_map_headers([None, "联系人"])
        assert mapping.get("") is None
        assert mapping.get("联系人") == "contact_name"

    def test_mapped_count(self):
        headers = ["供应商名称", "备注", "联系人"]
        assert auto_map_headers(headers).mapped_count(headers) == 2


class TestMaterializeRow:
    """Tests for materialize_row."""

    def test_positional_row(self):
        headers = ["供应商名称", "备注"]
        mapping = auto_map_headers(headers)
        assert materialize_row(headers, ["鲁信医药", "x"], mapping) == {"supplier_name": "鲁信医药"}

    def test_mapping_row(self):
        headers = ["供应商名称", "联系人"]
        mapping = auto_map_headers(headers)
        record = materialize_row(headers, {"联系人": "王伟"}, mapping)
        assert record == {"supplier_name": "", "contact_name": "王伟"}

    def test_short_row_and_none_cells_are_empty(self):
        headers = ["供应商名称", "联系人"]
        mapping = auto_map_headers(headers)
        assert materialize_row(headers, [None], mapping) == {
            "supplier_name": "",
            "contact_name": "",
        }

    def test_later_header_wins(self):
        headers = ["名称", "Company Name"]
        mapping = auto_map_headers(headers)
        assert materialize_row(headers, ["first", "second"], mapping) == {"supplier_name": "second"}

    def test_override_applies(self):
        headers = ["备注", "供应商名称"]
        mapping = auto_map_headers(headers).override("备注", "invoice_title")
        rows = materialize_rows(headers, [["抬头A", "甲公司"]], mapping)
        assert rows == [{"invoice_title": "抬头A", "supplier_name": "甲公司"}]

    def test_identity_mapping(self):
        headers = list(SYSTEM_FIELDS)
        row = [f"v{i}" for i in range(len(headers))]
        record = materialize_row(headers, row, ImportFieldMapping.identity())
        assert record == dict(zip(headers, row))
