"""Tests for core data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from levelup_rules.models import (
    BadgeCategory,
    BadgeMetricsSnapshot,
    BadgeTier,
    BadgeTierResult,
    BonusRule,
    CategoryProgression,
    EvidenceKind,
    EvidenceSubmission,
    FileDescriptor,
    FileValidationRuleSet,
    GitHubSignal,
    TaskDayAvailability,
    UrgencyLevel,
    VerificationContext,
)


class TestFileModels:
    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            FileDescriptor(mime_type="application/pdf", size_bytes=-1)

    def test_rule_set_requires_positive_max(self):
        with pytest.raises(ValidationError):
            FileValidationRuleSet(allowed_types=["application/pdf"], max_size_bytes=0)

    def test_min_size_optional(self):
        rules = FileValidationRuleSet(allowed_types=["image/png"], max_size_bytes=1024)
        assert rules.min_size_bytes is None


class TestTimeWindowModels:
    def test_bonus_rule_threshold_positive(self):
        with pytest.raises(ValidationError):
            BonusRule(threshold_hours=0, bonus_points=3, label="Follow-up")

    def test_day_of_week_range(self):
        with pytest.raises(ValidationError):
            TaskDayAvailability(
                is_available=True,
                is_past_due=False,
                is_future_day=False,
                can_request_extension=False,
                day_of_week=8,
                message="",
            )

    def test_urgency_values(self):
        assert [u.value for u in UrgencyLevel] == ["critical", "high", "medium", "low"]


class TestEvidenceModels:
    def test_submission_kind_from_string(self):
        submission = EvidenceSubmission(
            task_code="GHW_MERGE_1PR",
            evidence_kind="SCREENSHOT",
            file={"mime_type": "image/png", "size_bytes": 4096, "name": "pr.png"},
        )
        assert submission.evidence_kind == EvidenceKind.SCREENSHOT
        assert submission.file.size_bytes == 4096

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            EvidenceSubmission(task_code="GHW_MERGE_1PR", evidence_kind="VIDEO")

    def test_signal_parses_iso_timestamps(self):
        signal = GitHubSignal(kind="COMMIT_PUSHED", happened_at="2024-01-02T09:30:00Z")
        assert signal.happened_at == datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)

    def test_context_defaults(self):
        ctx = VerificationContext()
        assert ctx.evidence == []
        assert ctx.signals == []
        assert ctx.period_start is None


class TestBadgeModels:
    def test_snapshot_defaults(self):
        metrics = BadgeMetricsSnapshot()
        assert metrics.job_applications == 0
        assert metrics.has_premium_plan is False
        assert metrics.is_it_industry is False

    def test_premium_plans(self):
        assert BadgeMetricsSnapshot(subscription_plan="6 Months Plan").has_premium_plan is True
        assert BadgeMetricsSnapshot(subscription_plan="1 Year Plan").has_premium_plan is True
        assert BadgeMetricsSnapshot(subscription_plan="3 Months Plan").has_premium_plan is False

    def test_it_industry_is_exact(self):
        assert BadgeMetricsSnapshot(industry="IT").is_it_industry is True
        assert BadgeMetricsSnapshot(industry="it").is_it_industry is False

    def test_negative_metrics_rejected(self):
        with pytest.raises(ValidationError):
            BadgeMetricsSnapshot(job_applications=-1)

    def test_progress_bounded(self):
        with pytest.raises(ValidationError):
            BadgeTierResult(tier=BadgeTier.GOLD, progress_percent=101, unlocked=True)

    def test_category_tier_lookup(self):
        category = CategoryProgression(
            category=BadgeCategory.JOBS,
            tiers=[BadgeTierResult(tier=BadgeTier.SILVER, progress_percent=100, unlocked=True)],
        )
        assert category.tier(BadgeTier.SILVER).progress_percent == 100
        assert category.tier(BadgeTier.GOLD) is None
