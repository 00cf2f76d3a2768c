"""
Evidence Validator — checks GitHub task evidence before it is stored.

Behavioral Contract:
- Task codes are looked up in a fixed rule table; unknown codes accept any evidence
- Known codes reject evidence kinds they do not list
- The task URL patterns are a fallback gate: they are consulted only when the
  URL is not a well-formed github.com repository URL (Pages sites, etc.)
- Files are checked with the GitHub screenshot or document rule set
- Weekly (GHW_) tasks must be submitted inside their period; showcase (GHS_)
  tasks have no deadline
"""

import re
from datetime import timedelta, timezone
from typing import Dict, List, Optional
from urllib.parse import urlparse

from levelup_rules.files.validator import MB, validate_file
from levelup_rules.models.evidence import (
    CommitDaysResult,
    EvidenceKind,
    EvidenceSubmission,
    GitHubSignal,
    ReadmeUpdateResult,
    SignalKind,
    TaskEvidenceRule,
    TaskWindowResult,
    ValidationOutcome,
)
from levelup_rules.models.files import FileDescriptor, FileValidationRuleSet
from levelup_rules.observability.logging import get_logger
from levelup_rules.time_window.evaluator import Timestamp, coerce_datetime

logger = get_logger(__name__)

WEEKLY_TASK_PREFIX = "GHW_"

GITHUB_HOST = "github.com"
_WEB_SCHEMES = ("http", "https")
MAX_OWNER_LENGTH = 39
MAX_REPO_LENGTH = 100

_REPO_FULL_NAME = re.compile(r"[a-zA-Z0-9._-]+/[a-zA-Z0-9._-]+")

GITHUB_FILE_VALIDATION_RULES: Dict[str, FileValidationRuleSet] = {
    "screenshot": FileValidationRuleSet(
        allowed_types=["image/png", "image/jpeg", "image/gif", "image/webp"],
        max_size_bytes=5 * MB,
        min_size_bytes=1024,
    ),
    "markdown": FileValidationRuleSet(
        allowed_types=["text/markdown", "text/plain"],
        max_size_bytes=1 * MB,
        min_size_bytes=1,
    ),
    "document": FileValidationRuleSet(
        allowed_types=["application/pdf", "text/markdown", "text/plain"],
        max_size_bytes=10 * MB,
        min_size_bytes=1,
    ),
}

_URL_OR_SCREENSHOT = [EvidenceKind.URL, EvidenceKind.SCREENSHOT]

TASK_EVIDENCE_RULES: Dict[str, TaskEvidenceRule] = {
    "GHW_COMMIT_3DAYS": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"github\.com/.*/commits?", r"github\.com/.*/pulse"],
    ),
    "GHW_WEEKLY_CHANGELOG": TaskEvidenceRule(
        required_kinds=[EvidenceKind.URL],
        url_patterns=[r"github\.com/.*/releases", r"(?i)github\.com/.*/blob/.*CHANGELOG"],
    ),
    "GHW_MERGE_1PR": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"github\.com/.*/pull/\d+", r"github\.com/.*/pulls"],
    ),
    "GHW_CLOSE_2ISSUES": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"github\.com/.*/issues?", r"github\.com/.*/issues/\d+"],
    ),
    "GHW_README_TWEAK": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"(?i)github\.com/.*/blob/.*README", r"github\.com/.*/commit"],
    ),
    "GHW_CI_GREEN": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"github\.com/.*/actions", r"github\.com/.*/runs?"],
    ),
    "GHW_PAGES_DEPLOY": TaskEvidenceRule(
        required_kinds=[EvidenceKind.URL],
        url_patterns=[r"\.github\.io", r"pages\.dev", r"netlify\.app", r"vercel\.app"],
    ),
    "GHS_ADD_TOPICS": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"github\.com/.*/.*$"],  # Any repo URL
    ),
    "GHS_PAGES_SETUP": TaskEvidenceRule(
        required_kinds=_URL_OR_SCREENSHOT,
        url_patterns=[r"\.github\.io", r"github\.com/.*/settings/pages"],
    ),
}


def get_task_rule(task_code: str) -> Optional[TaskEvidenceRule]:
    return TASK_EVIDENCE_RULES.get(task_code)


def validate_github_url(url: str) -> ValidationOutcome:
    """
    A github.com URL with at least owner and repository path segments.

    Parsing follows browser URL rules where urlparse differs: web schemes
    may omit the slashes ("https:github.com/o/r"), and a non-numeric or
    out-of-range port makes the URL malformed.
    """
    try:
        parsed = urlparse(url)
        if parsed.scheme in _WEB_SCHEMES and not parsed.netloc:
            rest = url.strip()[len(parsed.scheme) + 1:].lstrip("/\\")
            parsed = urlparse(f"{parsed.scheme}://{rest}")
        hostname = parsed.hostname
        parsed.port  # Raises ValueError for a malformed port
    except ValueError:
        return ValidationOutcome(valid=False, error="Invalid URL format")

    if not parsed.scheme or not parsed.netloc:
        return ValidationOutcome(valid=False, error="Invalid URL format")

    if hostname != GITHUB_HOST:
        return ValidationOutcome(valid=False, error="URL must be from github.com")

    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) < 2:
        return ValidationOutcome(valid=False, error="Invalid GitHub URL format")

    return ValidationOutcome(valid=True)


def validate_repo_full_name(full_name: str) -> ValidationOutcome:
    if not _REPO_FULL_NAME.fullmatch(full_name):
        return ValidationOutcome(
            valid=False,
            error='Repository name must be in format "owner/repository" with valid characters',
        )

    owner, repo = full_name.split("/")
    if len(owner) > MAX_OWNER_LENGTH or len(repo) > MAX_REPO_LENGTH:
        return ValidationOutcome(valid=False, error="Owner or repository name is too long")

    return ValidationOutcome(valid=True)


def _matches_any(url: str, patterns: List[str]) -> bool:
    return any(re.search(p, url) for p in patterns)


def validate_evidence_for_task(
    task_code: str,
    evidence_kind: EvidenceKind,
    url: Optional[str] = None,
    file: Optional[FileDescriptor] = None,
) -> ValidationOutcome:
    """Check one piece of evidence against the rule for task_code."""
    evidence_kind = EvidenceKind(evidence_kind)
    rule = get_task_rule(task_code)
    if rule is None:
        return ValidationOutcome(valid=True)

    if evidence_kind not in rule.required_kinds:
        kinds = " or ".join(k.value for k in rule.required_kinds)
        logger.debug("evidence_kind_rejected", task_code=task_code, evidence_kind=evidence_kind.value)
        return ValidationOutcome(
            valid=False,
            error=f"This task requires evidence of type: {kinds}",
        )

    if evidence_kind == EvidenceKind.URL and url:
        url_check = validate_github_url(url)
        if not url_check.valid and rule.url_patterns:
            if not _matches_any(url, rule.url_patterns):
                logger.debug("evidence_url_rejected", task_code=task_code, url=url)
                return ValidationOutcome(
                    valid=False,
                    error="URL doesn't match expected pattern for this task",
                )

    if evidence_kind != EvidenceKind.URL and file is not None:
        rule_name = "screenshot" if evidence_kind == EvidenceKind.SCREENSHOT else "document"
        result = validate_file(file, GITHUB_FILE_VALIDATION_RULES[rule_name])
        if not result.is_valid:
            return ValidationOutcome(valid=False, error=result.error or "Invalid file")

    return ValidationOutcome(valid=True)


def validate_submission(submission: EvidenceSubmission) -> ValidationOutcome:
    return validate_evidence_for_task(
        submission.task_code,
        submission.evidence_kind,
        url=submission.url,
        file=submission.file,
    )


def validate_task_time_window(
    task_code: str,
    submission_time: Timestamp,
    period_start: Optional[Timestamp] = None,
    period_end: Optional[Timestamp] = None,
) -> TaskWindowResult:
    """Weekly tasks must land inside [period_start, period_end]."""
    if task_code.startswith(WEEKLY_TASK_PREFIX) and period_start and period_end:
        submitted = coerce_datetime(submission_time)
        start = coerce_datetime(period_start)
        end = coerce_datetime(period_end)

        if submitted < start:
            return TaskWindowResult(
                valid=False,
                error="Cannot submit evidence before the task period starts",
            )
        if submitted > end:
            return TaskWindowResult(valid=False, error="Task period has ended")

        hours_remaining = max(0.0, (end - submitted) / timedelta(hours=1))
        return TaskWindowResult(valid=True, hours_remaining=hours_remaining)

    # Showcase tasks and everything else have no deadline
    return TaskWindowResult(valid=True)


def signals_in_period(
    signals: List[GitHubSignal],
    kind: SignalKind,
    period_start: Timestamp,
    period_end: Timestamp,
) -> List[GitHubSignal]:
    """Signals of one kind inside the inclusive period, in input order."""
    start = coerce_datetime(period_start)
    end = coerce_datetime(period_end)
    return [
        s for s in signals
        if s.kind == kind.value and start <= coerce_datetime(s.happened_at) <= end
    ]


def calculate_commit_days(
    signals: List[GitHubSignal],
    period_start: Timestamp,
    period_end: Timestamp,
) -> CommitDaysResult:
    """Distinct UTC calendar days with at least one pushed commit."""
    dates = {
        coerce_datetime(s.happened_at).astimezone(timezone.utc).date().isoformat()
        for s in signals_in_period(signals, SignalKind.COMMIT_PUSHED, period_start, period_end)
    }
    return CommitDaysResult(distinct_days=len(dates), commit_dates=sorted(dates))


def verify_readme_update(
    signals: List[GitHubSignal],
    period_start: Timestamp,
    period_end: Timestamp,
) -> ReadmeUpdateResult:
    """
    README updates inside the period.

    last_update is the first matching signal in input order, which is the
    most recent only when callers pass signals newest first.
    """
    updates = signals_in_period(signals, SignalKind.README_UPDATED, period_start, period_end)
    return ReadmeUpdateResult(
        updated=len(updates) > 0,
        update_count=len(updates),
        last_update=updates[0].happened_at if updates else None,
    )
