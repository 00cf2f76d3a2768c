"""Tests for the Evidence Validator."""

from datetime import datetime, timezone

import pytest

from levelup_rules.evidence.validator import (
    TASK_EVIDENCE_RULES,
    calculate_commit_days,
    get_task_rule,
    signals_in_period,
    validate_evidence_for_task,
    validate_github_url,
    validate_repo_full_name,
    validate_submission,
    validate_task_time_window,
    verify_readme_update,
)
from levelup_rules.models.evidence import (
    EvidenceKind,
    EvidenceSubmission,
    GitHubSignal,
    SignalKind,
)
from levelup_rules.models.files import FileDescriptor

UTC = timezone.utc
PERIOD_START = datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
PERIOD_END = datetime(2024, 1, 7, 23, 59, 59, tzinfo=UTC)


def _make_signal(kind: SignalKind, day: int, hour: int = 12) -> GitHubSignal:
    return GitHubSignal(
        kind=kind.value,
        happened_at=datetime(2024, 1, day, hour, 0, tzinfo=UTC),
        repo="octocat/hello-world",
    )


class TestGitHubUrl:
    def test_valid_repo_url(self):
        assert validate_github_url("https://github.com/octocat/hello-world").valid is True
        assert validate_github_url("https://github.com/octocat/hello-world/pull/42").valid is True

    def test_web_scheme_without_slashes(self):
        assert validate_github_url("https:github.com/octocat/hello-world").valid is True
        assert validate_github_url("https:/github.com/octocat/hello-world").valid is True
        assert validate_github_url("https:").error == "Invalid URL format"

    @pytest.mark.parametrize(
        "url,error",
        [
            ("not a url", "Invalid URL format"),
            ("https://gitlab.com/octocat/hello-world", "URL must be from github.com"),
            ("https://octocat.github.io/site", "URL must be from github.com"),
            ("https://github.com/octocat", "Invalid GitHub URL format"),
            ("https://github.com/", "Invalid GitHub URL format"),
            ("https://github.com:abc/octocat/hello-world", "Invalid URL format"),
            ("https://github.com:99999/octocat/hello-world", "Invalid URL format"),
        ],
    )
    def test_invalid_urls(self, url, error):
        outcome = validate_github_url(url)
        assert outcome.valid is False
        assert outcome.error == error


class TestRepoFullName:
    def test_valid(self):
        assert validate_repo_full_name("octocat/hello-world").valid is True
        assert validate_repo_full_name("my.org/repo_name-2").valid is True

    @pytest.mark.parametrize("name", ["octocat", "octocat/", "a/b/c", "owner/re po", "/repo"])
    def test_bad_format(self, name):
        outcome = validate_repo_full_name(name)
        assert outcome.valid is False
        assert "owner/repository" in outcome.error

    def test_length_limits(self):
        assert validate_repo_full_name("a" * 39 + "/repo").valid is True
        assert validate_repo_full_name("a" * 40 + "/repo").error == "Owner or repository name is too long"
        assert validate_repo_full_name("owner/" + "r" * 101).valid is False


class TestEvidenceForTask:
    def test_unknown_task_accepts_anything(self):
        assert get_task_rule("LINKEDIN_POST") is None
        outcome = validate_evidence_for_task("LINKEDIN_POST", EvidenceKind.FILE)
        assert outcome.valid is True

    def test_every_rule_lists_kinds(self):
        for rule in TASK_EVIDENCE_RULES.values():
            assert rule.required_kinds

    def test_wrong_kind(self):
        outcome = validate_evidence_for_task("GHW_WEEKLY_CHANGELOG", EvidenceKind.SCREENSHOT)
        assert outcome.valid is False
        assert outcome.error == "This task requires evidence of type: URL"

    def test_file_kind_rejected_for_url_or_screenshot_tasks(self):
        outcome = validate_evidence_for_task("GHW_MERGE_1PR", "FILE")
        assert outcome.error == "This task requires evidence of type: URL or SCREENSHOT"

    def test_pull_request_url(self):
        outcome = validate_evidence_for_task(
            "GHW_MERGE_1PR", EvidenceKind.URL, url="https://github.com/octocat/hello-world/pull/42"
        )
        assert outcome.valid is True

    def test_non_github_url_must_match_pattern(self):
        outcome = validate_evidence_for_task(
            "GHW_MERGE_1PR", EvidenceKind.URL, url="https://gitlab.com/octocat/hello-world/merge_requests/1"
        )
        assert outcome.valid is False
        assert outcome.error == "URL doesn't match expected pattern for this task"

    def test_github_url_skips_task_pattern(self):
        # Patterns only gate URLs that fail the github.com check, so any
        # well-formed repository URL is accepted even for the wrong task
        outcome = validate_evidence_for_task(
            "GHW_MERGE_1PR", EvidenceKind.URL, url="https://github.com/o/r/issues/3"
        )
        assert outcome.valid is True
        assert outcome.error is None

    def test_pages_site_passes_on_pattern(self):
        outcome = validate_evidence_for_task(
            "GHW_PAGES_DEPLOY", EvidenceKind.URL, url="https://octocat.github.io/portfolio"
        )
        assert outcome.valid is True
        outcome = validate_evidence_for_task(
            "GHW_PAGES_DEPLOY", EvidenceKind.URL, url="https://example.com/portfolio"
        )
        assert outcome.valid is False

    def test_screenshot_file_checked(self):
        small = FileDescriptor(mime_type="image/png", size_bytes=500, name="shot.png")
        outcome = validate_evidence_for_task("GHW_CI_GREEN", EvidenceKind.SCREENSHOT, file=small)
        assert outcome.valid is False
        assert outcome.error == "File size too small. Minimum required: 1KB"

        pdf = FileDescriptor(mime_type="application/pdf", size_bytes=50_000, name="run.pdf")
        outcome = validate_evidence_for_task("GHW_CI_GREEN", EvidenceKind.SCREENSHOT, file=pdf)
        assert outcome.error.startswith("File type not allowed")

        good = FileDescriptor(mime_type="image/webp", size_bytes=50_000, name="run.webp")
        assert validate_evidence_for_task("GHW_CI_GREEN", EvidenceKind.SCREENSHOT, file=good).valid

    def test_validate_submission(self):
        submission = EvidenceSubmission(
            task_code="GHW_README_TWEAK",
            evidence_kind=EvidenceKind.URL,
            url="https://github.com/octocat/hello-world/blob/main/README.md",
        )
        assert validate_submission(submission).valid is True


class TestTaskTimeWindow:
    def test_inside_period(self):
        result = validate_task_time_window(
            "GHW_MERGE_1PR", datetime(2024, 1, 7, 11, 59, 59, tzinfo=UTC), PERIOD_START, PERIOD_END
        )
        assert result.valid is True
        assert result.hours_remaining == pytest.approx(12.0)

    def test_before_period(self):
        result = validate_task_time_window(
            "GHW_MERGE_1PR", "2023-12-31T23:00:00Z", PERIOD_START, PERIOD_END
        )
        assert result.valid is False
        assert result.error == "Cannot submit evidence before the task period starts"

    def test_after_period(self):
        result = validate_task_time_window(
            "GHW_MERGE_1PR", "2024-01-08T00:00:00Z", PERIOD_START, PERIOD_END
        )
        assert result.valid is False
        assert result.error == "Task period has ended"

    def test_showcase_tasks_have_no_deadline(self):
        result = validate_task_time_window(
            "GHS_ADD_TOPICS", "2030-01-01T00:00:00Z", PERIOD_START, PERIOD_END
        )
        assert result.valid is True
        assert result.hours_remaining is None

    def test_weekly_task_without_period(self):
        assert validate_task_time_window("GHW_CI_GREEN", "2024-01-03T00:00:00Z").valid is True


class TestSignals:
    def test_period_is_inclusive(self):
        signals = [
            GitHubSignal(kind="PR_MERGED", happened_at=PERIOD_START),
            GitHubSignal(kind="PR_MERGED", happened_at=PERIOD_END),
            GitHubSignal(kind="PR_MERGED", happened_at="2024-01-08T00:00:00Z"),
            GitHubSignal(kind="PR_OPENED", happened_at="2024-01-03T00:00:00Z"),
        ]
        found = signals_in_period(signals, SignalKind.PR_MERGED, PERIOD_START, PERIOD_END)
        assert len(found) == 2

    def test_commit_days(self):
        signals = [
            _make_signal(SignalKind.COMMIT_PUSHED, 5),
            _make_signal(SignalKind.COMMIT_PUSHED, 2, hour=9),
            _make_signal(SignalKind.COMMIT_PUSHED, 2, hour=18),
            _make_signal(SignalKind.COMMIT_PUSHED, 3),
            _make_signal(SignalKind.COMMIT_PUSHED, 9),
            _make_signal(SignalKind.README_UPDATED, 4),
        ]
        result = calculate_commit_days(signals, PERIOD_START, PERIOD_END)
        assert result.distinct_days == 3
        assert result.commit_dates == ["2024-01-02", "2024-01-03", "2024-01-05"]

    def test_commit_days_none(self):
        result = calculate_commit_days([], PERIOD_START, PERIOD_END)
        assert result.distinct_days == 0
        assert result.commit_dates == []

    def test_readme_update_uses_first_match(self):
        signals = [
            _make_signal(SignalKind.README_UPDATED, 6),
            _make_signal(SignalKind.README_UPDATED, 2),
            _make_signal(SignalKind.README_UPDATED, 10),
        ]
        result = verify_readme_update(signals, PERIOD_START, PERIOD_END)
        assert result.updated is True
        assert result.update_count == 2
        assert result.last_update == datetime(2024, 1, 6, 12, 0, tzinfo=UTC)

    def test_readme_not_updated(self):
        result = verify_readme_update(
            [_make_signal(SignalKind.COMMIT_PUSHED, 2)], PERIOD_START, PERIOD_END
        )
        assert result.updated is False
        assert result.update_count == 0
        assert result.last_update is None
