"""Tests for qualification record synthesis and expiry classification."""

from collections import Counter
from datetime import date, timedelta

import pytest

from srm_engines.qualification import (
    ANNUAL_REVIEW_REMARK,
    DEFAULT_ISSUER,
    QUALIFICATION_TYPES,
    ExpiryStatus,
    QualificationRecord,
    classify_expiry,
    sample_expiry_offset,
    synthesize_qualifications,
)

AS_OF = date(2025, 6, 30)


class TestSynthesizeQualifications:
    """Tests for synthesize_qualifications."""

    def test_numbering_and_fields(self):
        records = synthesize_qualifications("S-1001", 3, AS_OF)

        assert [r.id for r in records] == ["Q-S-1001-1", "Q-S-1001-2", "Q-S-1001-3"]
        first = records[0]
        assert first.number == "NO-100001"
        assert first.type == QUALIFICATION_TYPES[1]
        assert first.issue_date == AS_OF - timedelta(days=366)
        assert first.issuer == DEFAULT_ISSUER
        assert first.attachments == ()

    def test_start_index_continues_numbering(self):
        records = synthesize_qualifications("S-1001", 2, AS_OF, start_index=12)
        assert [r.id for r in records] == ["Q-S-1001-13", "Q-S-1001-14"]

    def test_annual_review_remark_every_eleventh(self):
        records = synthesize_qualifications("S-1002", 22, AS_OF)
        flagged = [r.id for r in records if r.remark == ANNUAL_REVIEW_REMARK]
        assert flagged == ["Q-S-1002-11", "Q-S-1002-22"]

    def test_zero_count(self):
        assert synthesize_qualifications("S-1001", 0, AS_OF) == ()

    def test_deterministic(self):
        assert synthesize_qualifications("DEFAULT", 20, AS_OF) == synthesize_qualifications(
            "DEFAULT", 20, AS_OF
        )

    def test_dates_follow_as_of(self):
        """Moving the as-of date shifts every date by the same amount."""
        later = AS_OF + timedelta(days=10)
        for a, b in zip(
            synthesize_qualifications("S-1003", 5, AS_OF),
            synthesize_qualifications("S-1003", 5, later),
        ):
            assert b.expiry_date - a.expiry_date == timedelta(days=10)
            assert b.issue_date - a.issue_date == timedelta(days=10)


class TestExpiryOffset:
    def test_offsets_within_distribution(self):
        for k in range(1, 400):
            offset = sample_expiry_offset("S-1001", k)
            assert -30 <= offset <= 365
            assert offset != 0

    def test_band_counts_over_seeded_catalogue(self):
        """Suppliers S-1001..S-1060, records 1-16: every band is populated."""
        statuses = Counter(
            classify_expiry(AS_OF + timedelta(days=sample_expiry_offset(f"S-{s}", k)), AS_OF).status
            for s in range(1001, 1061)
            for k in range(1, 17)
        )
        assert statuses == {
            ExpiryStatus.EXPIRED: 149,
            ExpiryStatus.EXPIRING: 181,
            ExpiryStatus.VALID: 630,
        }


class TestClassifyExpiry:
    @pytest.mark.parametrize(
        ("days", "status"),
        [
            (-1, ExpiryStatus.EXPIRED),
            (0, ExpiryStatus.EXPIRING),
            (30, ExpiryStatus.EXPIRING),
            (31, ExpiryStatus.VALID),
        ],
    )
    def test_boundaries(self, days, status):
        assessment = classify_expiry(AS_OF + timedelta(days=days), AS_OF)
        assert assessment.status is status
        assert assessment.days_left == days


class TestQualificationRecord:
    def test_dict_round_trip(self):
        record = QualificationRecord(
            id="Q-S-1001-1",
            type="GSP认证",
            number="NO-100001",
            issue_date=date(2024, 1, 2),
            expiry_date=date(2026, 1, 2),
            attachments=("scan.pdf",),
        )
        data = record.to_dict()
        assert data["issue_date"] == "2024-01-02"
        assert data["attachments"] == ["scan.pdf"]
        assert QualificationRecord.from_dict(data) == record

    def test_from_dict_requires_iso_dates(self):
        with pytest.raises(ValueError):
            QualificationRecord.from_dict(
                {"id": "Q-1", "issue_date": "2024/01/02", "expiry_date": "2026-01-02"}
            )
