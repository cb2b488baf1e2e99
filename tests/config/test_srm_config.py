"""
Tests for YAML configuration loading (srm_config).

Covers:
- Packaged defaults
- Checksum determinism
- SRM_CONFIG_TRACE emission
- Strict parsing failures
"""

import pytest
import yaml

from srm_config import DEFAULT_CONFIG_PATH, get_active_config
from srm_config.loader import compute_checksum, load_yaml_file, parse_config, parse_seeding
from srm_config.schema import SeedingConfig
from srm_kernel.exceptions import (
    InvalidGradingRuleError,
    InvalidWeightError,
    UnknownSystemFieldError,
)


def _base_data() -> dict:
    return load_yaml_file(DEFAULT_CONFIG_PATH)


class TestDefaults:
    """Packaged srm.yaml."""

    def test_default_grading_rule(self, srm_config):
        rule = srm_config.grading_rule
        assert [(c.key, c.name, c.min_score) for c in rule.categories] == [
            ("A", "A级", 85),
            ("B", "B级", 70),
            ("C", "C级", 0),
        ]
        assert [(m.key, m.weight) for m in rule.metrics] == [
            ("on_time_delivery", 40),
            ("quality_score", 40),
            ("compliance_score", 20),
        ]
        assert rule.total_weight == 100

    def test_default_cleansing(self, srm_config):
        cleansing = srm_config.cleansing
        assert cleansing.trim_all and cleansing.uppercase_code and cleansing.normalize_phone
        assert cleansing.remove_duplicates
        assert cleansing.dedup_key == "social_credit_code"
        assert not cleansing.validate_email

    def test_default_seeding(self, srm_config):
        assert srm_config.seeding == SeedingConfig()
        assert srm_config.default_rating == 70
        assert srm_config.region_table() is None

    def test_identity(self, srm_config):
        assert srm_config.config_id == "srm-default"
        assert srm_config.version == 1
        assert len(srm_config.checksum) == 64


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(_base_data()) == compute_checksum(_base_data())

    def test_key_order_ignored(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_changes_with_content(self):
        data = _base_data()
        changed = _base_data()
        changed["default_rating"] = 71
        assert compute_checksum(data) != compute_checksum(changed)


class TestGetActiveConfig:
    def test_trace_emitted(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "SRM_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["config_id"] == "srm-default"
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["category_count"] == 3
        assert traces[0]["metric_count"] == 3

    def test_override_path(self, tmp_path):
        data = _base_data()
        data["config_id"] = "custom"
        data["region_codes"] = {"济南市": "370102"}
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")

        config = get_active_config(path)
        assert config.config_id == "custom"
        assert config.region_table() == {"济南市": "370102"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("grading_rule: [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            get_active_config(path)


class TestStrictParsing:
    """parse_config rejects malformed files."""

    def test_missing_required_key(self):
        data = _base_data()
        del data["config_id"]
        with pytest.raises(KeyError):
            parse_config(data)

    def test_missing_metric_weight(self):
        data = _base_data()
        del data["grading_rule"]["metrics"][0]["weight"]
        with pytest.raises(KeyError):
            parse_config(data)

    def test_empty_categories(self):
        data = _base_data()
        data["grading_rule"]["categories"] = []
        with pytest.raises(InvalidGradingRuleError):
            parse_config(data)

    def test_empty_metrics(self):
        data = _base_data()
        data["grading_rule"]["metrics"] = []
        with pytest.raises(InvalidGradingRuleError):
            parse_config(data)

    @pytest.mark.parametrize("weight", [-1, "40", True, None])
    def test_bad_weight(self, weight):
        data = _base_data()
        data["grading_rule"]["metrics"][1]["weight"] = weight
        with pytest.raises(InvalidWeightError) as exc_info:
            parse_config(data)
        assert exc_info.value.metric_key == "quality_score"
        assert exc_info.value.code == "INVALID_WEIGHT"

    def test_non_numeric_threshold(self):
        data = _base_data()
        data["grading_rule"]["categories"][0]["min_score"] = "high"
        with pytest.raises(InvalidGradingRuleError):
            parse_config(data)

    def test_unknown_dedup_key(self):
        data = _base_data()
        data["cleansing"]["dedup_key"] = "phone"
        with pytest.raises(UnknownSystemFieldError) as exc_info:
            parse_config(data)
        assert exc_info.value.field_key == "phone"

    def test_seeding_range_inverted(self):
        with pytest.raises(ValueError):
            parse_seeding({"qualifications_min": 16, "qualifications_max": 10})

    def test_optional_sections_default(self):
        data = _base_data()
        for key in ("cleansing", "seeding", "region_codes", "default_rating"):
            del data[key]
        config = parse_config(data)
        assert config.seeding == SeedingConfig()
        assert config.default_rating == 70


class TestSeedingConfig:
    def test_qualification_count_cycles(self):
        seeding = SeedingConfig()
        counts = [seeding.qualification_count(i) for i in range(9)]
        assert counts == [10, 11, 12, 13, 14, 15, 16, 10, 11]
