"""
Tests for the import normalization pipeline.

Covers:
- Header detection and malformed input
- Mapping resolution (auto, ImportFieldMapping, plain dict)
- Cleansing toggles end to end
- Deduplication and idempotence
- Demo table
"""

from srm_ingestion.demo import TEMPLATE_HEADERS, generate_demo_table, template_table
from srm_ingestion.domain.types import ImportFieldMapping, NormalizationResult
from srm_ingestion.pipeline import normalize_and_dedup, split_table
from srm_kernel.domain.values import SYSTEM_FIELDS, CleansingConfig

HEADERS = ["供应商名称", "统一社会信用代码", "联系人手机", "联系人邮箱", "备注"]


def _table(*rows):
    return [HEADERS, *rows]


class TestSplitTable:
    def test_header_first(self):
        headers, rows = split_table([["a", None], [1, 2]])
        assert headers == ["a", ""]
        assert rows == [[1, 2]]

    def test_malformed_inputs(self):
        assert split_table(None) == ([], [])
        assert split_table([]) == ([], [])
        assert split_table("供应商名称") == ([], [])
        assert split_table(["not-a-row"]) == ([], [])

    def test_non_row_items_dropped_with_warning(self, captured_logs):
        headers, rows = split_table([["a"], ["x"], 5, None, {"a": "y"}])

        assert rows == [["x"], {"a": "y"}]
        warnings = [r for r in captured_logs() if r["message"] == "import_rows_dropped"]
        assert warnings[0]["dropped"] == 2


class TestNormalizeAndDedup:
    """Tests for normalize_and_dedup."""

    def test_empty_or_malformed_input_yields_no_rows(self):
        for table in (None, [], {"rows": []}, [["only", "headers"]]):
            result = normalize_and_dedup(table)
            assert result.row_count == 0
            assert result.removed_count == 0

    def test_auto_mapping_and_default_cleansing(self):
        table = _table(
            [" 泉泰医药 ", "91370100ma3k2b4c50", "138 1234 5678", "bad", "忽略"],
        )
        result = normalize_and_dedup(table)

        assert result.rows == (
            {
                "supplier_name": "泉泰医药",
                "social_credit_code": "91370100MA3K2B4C50",
                "contact_phone": "13812345678",
                "contact_email": "bad",
            },
        )
        assert result.mapped_field_count == 4
        assert result.raw_count == 1

    def test_dedup_on_credit_code(self):
        table = _table(
            ["甲", "abc", "", "", ""],
            ["乙", "ABC ", "", "", ""],
            ["丙", "", "", "", ""],
            ["丁", "", "", "", ""],
        )
        result = normalize_and_dedup(table)

        assert [r["supplier_name"] for r in result.rows] == ["甲", "丙", "丁"]
        assert result.removed_count == 1

    def test_dedup_disabled(self):
        table = _table(["甲", "ABC", "", "", ""], ["乙", "ABC", "", "", ""])
        result = normalize_and_dedup(table, config={"remove_duplicates": False})
        assert result.row_count == 2
        assert result.removed_count == 0

    def test_dedup_on_other_key(self):
        table = _table(["甲", "A", "", "", ""], ["甲", "B", "", "", ""])
        config = CleansingConfig(dedup_key="supplier_name")
        assert normalize_and_dedup(table, config=config).row_count == 1

    def test_invalid_emails_counted(self):
        table = _table(["甲", "A", "", "bad", ""], ["乙", "B", "", "ok@x.cn", ""])
        result = normalize_and_dedup(table, config=CleansingConfig(validate_email=True))

        assert result.invalid_email_count == 1
        assert [r["contact_email"] for r in result.rows] == ["", "ok@x.cn"]

    def test_explicit_mapping_dict(self):
        table = [["col1", "col2"], ["甲", "9137"]]
        result = normalize_and_dedup(
            table,
            mapping={"col1": "supplier_name", "col2": "social_credit_code"},
        )
        assert result.rows == ({"supplier_name": "甲", "social_credit_code": "9137"},)
        assert result.mapped_field_count == 2

    def test_unknown_targets_in_mapping_dict_are_dropped(self):
        table = [["col1", "col2"], ["甲", "x"]]
        result = normalize_and_dedup(table, mapping={"col1": "supplier_name", "col2": "nope"})
        assert result.rows == ({"supplier_name": "甲"},)

    def test_later_header_wins(self):
        table = [["名称", "Supplier Name"], ["旧", "新"]]
        assert normalize_and_dedup(table).rows[0]["supplier_name"] == "新"

    def test_mapping_rows_by_header(self):
        table = [HEADERS, {"供应商名称": "甲", "统一社会信用代码": "x1"}]
        result = normalize_and_dedup(table)
        assert result.rows[0]["social_credit_code"] == "X1"
        assert result.rows[0]["contact_phone"] == ""

    def test_idempotent_on_own_output(self):
        table = _table(
            ["甲", "a1", "138-0000-0001", "", ""],
            ["乙", "A1", "", "", ""],
            ["丙", "b2", "", "", ""],
        )
        first = normalize_and_dedup(table)
        second = normalize_and_dedup(first.to_table(), ImportFieldMapping.identity())

        assert second.removed_count == 0
        assert second.rows == first.rows

    def test_completion_logged(self, captured_logs):
        normalize_and_dedup(_table(["甲", "A", "", "", ""]))

        done = [r for r in captured_logs() if r["message"] == "normalization_completed"]
        assert done[0]["row_count"] == 1
        assert done[0]["raw_count"] == 1


class TestNormalizationResult:
    def test_columns_follow_system_field_order(self):
        result = NormalizationResult(
            rows=({"contact_name": "x", "supplier_name": "y"}, {"zz_extra": 1})
        )
        assert result.columns() == ("supplier_name", "contact_name", "zz_extra")
        assert result.to_table() == [
            ["supplier_name", "contact_name", "zz_extra"],
            ["y", "x", ""],
            ["", "", 1],
        ]

    def test_to_dict(self):
        result = NormalizationResult(rows=({"supplier_name": "y"},), removed_count=2)
        assert result.to_dict()["removed_count"] == 2
        assert result.to_dict()["rows"] == [{"supplier_name": "y"}]


class TestDemoTable:
    def test_template(self):
        assert template_table() == [list(TEMPLATE_HEADERS)]
        assert len(TEMPLATE_HEADERS) == len(SYSTEM_FIELDS)

    def test_demo_table_shape(self):
        table = generate_demo_table(25)
        assert len(table) == 26
        assert all(len(row) == len(TEMPLATE_HEADERS) for row in table)

    def test_demo_normalizes_cleanly(self):
        result = normalize_and_dedup(generate_demo_table())

        assert result.raw_count == 300
        assert result.row_count == 300
        assert result.removed_count == 0
        assert result.mapped_field_count == len(SYSTEM_FIELDS)
        for row in result.rows:
            assert row["supplier_name"] == row["supplier_name"].strip()
            assert row["social_credit_code"] == row["social_credit_code"].upper()
            assert len(row["contact_phone"]) == 11

    def test_deterministic(self):
        assert generate_demo_table(10) == generate_demo_table(10)
