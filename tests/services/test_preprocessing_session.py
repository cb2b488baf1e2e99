"""Tests for the interactive import preprocessing session."""

import pytest
import yaml

from srm_config import DEFAULT_CONFIG_PATH, get_active_config
from srm_config.loader import load_yaml_file
from srm_kernel.domain.values import CleansingConfig
from srm_kernel.exceptions import UnknownSystemFieldError
from srm_services.preprocessing import PreprocessingSession
from srm_services.storage_keys import PREPROCESS_LAST_KEY, SRM_COLLECTION

TABLE = [
    ["供应商名称", "统一社会信用代码", "联系人邮箱", "备注"],
    [" 甲 ", "abc", "a@b.cn", "r1"],
    ["乙", "ABC", "bad", "r2"],
    ["丙", "def", "", "r3"],
]


@pytest.fixture
def session(srm_config):
    s = PreprocessingSession(srm_config)
    s.load_table(TABLE)
    return s


class TestLoading:
    def test_load_table(self, session):
        assert session.raw_count == 3
        assert session.headers == ("供应商名称", "统一社会信用代码", "联系人邮箱", "备注")
        assert session.mapped_field_count == 3
        assert session.mapped_progress == 75
        assert session.last_preview is None

    def test_load_malformed_table(self, srm_config):
        s = PreprocessingSession(srm_config)
        assert s.load_table({"not": "a table"}) == 0
        assert s.headers == ()
        assert s.mapped_progress == 0
        assert s.preview().row_count == 0

    def test_load_demo(self, srm_config):
        s = PreprocessingSession(srm_config)
        assert s.load_demo(20) == 20
        assert s.mapped_progress == 100

    def test_reload_discards_preview(self, session):
        session.preview()
        session.load_table(TABLE)
        assert session.last_preview is None


class TestEdits:
    """Mapping overrides and toggles invalidate the preview."""

    def test_set_mapping(self, session):
        session.preview()
        session.set_mapping("备注", "invoice_title")

        assert session.last_preview is None
        assert session.mapped_field_count == 4
        assert session.preview().rows[0]["invoice_title"] == "r1"

    def test_unmap(self, session):
        session.set_mapping("联系人邮箱", "")
        assert session.mapping.get("联系人邮箱") is None
        assert "contact_email" not in session.preview().rows[0]

    def test_set_mapping_unknown_field(self, session):
        with pytest.raises(UnknownSystemFieldError):
            session.set_mapping("备注", "remark")

    def test_update_options(self, session):
        session.preview()
        session.update_options(validate_email=True, remove_duplicates=False)

        assert session.last_preview is None
        result = session.preview()
        assert result.row_count == 3
        assert result.invalid_email_count == 1

    def test_update_options_unknown_dedup_key(self, session):
        with pytest.raises(UnknownSystemFieldError):
            session.update_options(dedup_key="remark")

    def test_update_options_unknown_toggle(self, session):
        with pytest.raises(TypeError):
            session.update_options(lowercase_everything=True)

    def test_initial_options(self, srm_config):
        s = PreprocessingSession(srm_config, options=CleansingConfig(trim_all=False))
        assert not s.options.trim_all


class TestConfiguredToggles:
    """Initial toggles come from the cleansing section of the configuration."""

    def test_packaged_defaults(self, srm_config):
        assert PreprocessingSession(srm_config).options == srm_config.cleansing

    def test_toggles_from_yaml(self, tmp_path):
        data = load_yaml_file(DEFAULT_CONFIG_PATH)
        data["cleansing"] = {"validate_email": True, "remove_duplicates": False}
        path = tmp_path / "cleansing.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        s = PreprocessingSession(get_active_config(path))
        assert s.options.validate_email
        assert not s.options.remove_duplicates
        assert s.options.trim_all

        s.load_table(TABLE)
        result = s.preview()
        assert result.row_count == 3
        assert result.invalid_email_count == 1

    def test_string_toggle_keeps_default(self, tmp_path):
        data = load_yaml_file(DEFAULT_CONFIG_PATH)
        data["cleansing"] = {"trim_all": "false", "validate_email": "yes"}
        path = tmp_path / "quoted.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        options = PreprocessingSession(get_active_config(path)).options
        assert options.trim_all
        assert not options.validate_email


class TestPreviewAndSubmit:
    def test_preview(self, session):
        result = session.preview()

        assert [r["supplier_name"] for r in result.rows] == ["甲", "丙"]
        assert result.removed_count == 1
        assert session.last_preview is result

    def test_submit_without_preview(self, session, memory_repository):
        assert session.submit(memory_repository) is False
        assert memory_repository.get(SRM_COLLECTION, PREPROCESS_LAST_KEY) is None

    def test_submit(self, session, repository):
        preview = session.preview()
        assert session.submit(repository) is True

        stored = repository.get(SRM_COLLECTION, PREPROCESS_LAST_KEY)
        assert stored["rows"] == [dict(r) for r in preview.rows]
        assert stored["mapping"]["统一社会信用代码"] == "social_credit_code"
        assert stored["mapping"]["备注"] is None
        assert stored["options"] == CleansingConfig().to_dict()

    def test_submit_logged(self, session, memory_repository, captured_logs):
        session.preview()
        session.submit(memory_repository)

        submitted = [r for r in captured_logs() if r["message"] == "preprocess_submitted"]
        assert submitted[0]["row_count"] == 2
        assert submitted[0]["removed_count"] == 1
        assert submitted[0]["session_id"] == session.session_id

    def test_preview_records_carry_session_id(self, srm_config, captured_logs):
        s = PreprocessingSession(srm_config, session_id="import-7")
        s.load_table(TABLE)
        s.preview()

        records = {r["message"]: r for r in captured_logs()}
        assert records["preprocess_table_loaded"]["session_id"] == "import-7"
        assert records["normalization_completed"]["session_id"] == "import-7"
