"""
Weekly Task Verification — scores GitHub tasks from recorded activity.

Each task code maps to a verifier that inspects the week's signals, the
latest repository snapshot and any submitted evidence. Signals prove a task
outright; evidence alone earns partial credit pending review.

Behavioral Contract:
- Status starts NOT_STARTED, or SUBMITTED when evidence exists
- A verifier either upgrades the status with points and a note, or leaves it
- Period-bound tasks ignore signals outside [period_start, period_end]
- Unknown task codes with evidence are flagged for manual review
"""

from typing import Callable, Dict, Optional, Tuple

from levelup_rules.evidence.validator import calculate_commit_days, signals_in_period
from levelup_rules.models.evidence import (
    SignalKind,
    VerificationContext,
    VerificationStatus,
    WeeklyTaskVerification,
)
from levelup_rules.observability.logging import get_logger
from levelup_rules.rounding import round_half_up

logger = get_logger(__name__)

REQUIRED_COMMIT_DAYS = 3
CONSISTENCY_COMMIT_DAYS = 5
REQUIRED_TOPICS = 5

# (status, points, note), or None when nothing was proven
Verdict = Optional[Tuple[VerificationStatus, int, str]]
TaskVerifier = Callable[[VerificationContext], Verdict]


def _count_in_period(ctx: VerificationContext, kind: SignalKind) -> int:
    if ctx.period_start is None or ctx.period_end is None:
        return 0
    return len(signals_in_period(ctx.signals, kind, ctx.period_start, ctx.period_end))


def _evidence_url_containing(ctx: VerificationContext, *needles: str) -> bool:
    return any(e.url and any(n in e.url for n in needles) for e in ctx.evidence)


def _verify_commit_days(ctx: VerificationContext) -> Verdict:
    if ctx.period_start is None or ctx.period_end is None:
        return None

    days = calculate_commit_days(ctx.signals, ctx.period_start, ctx.period_end).distinct_days
    if days >= REQUIRED_COMMIT_DAYS:
        points = 15
        if days >= CONSISTENCY_COMMIT_DAYS:
            points += 5
        return VerificationStatus.VERIFIED, points, f"Committed on {days} distinct days"
    if days > 0:
        points = round_half_up(days / REQUIRED_COMMIT_DAYS * 15)
        return (
            VerificationStatus.PARTIALLY_VERIFIED,
            points,
            f"Committed on {days}/{REQUIRED_COMMIT_DAYS} days",
        )
    return None


def _verify_changelog(ctx: VerificationContext) -> Verdict:
    if _count_in_period(ctx, SignalKind.RELEASE_PUBLISHED) > 0:
        return VerificationStatus.VERIFIED, 12, "Release published with changelog"
    if _evidence_url_containing(ctx, "CHANGELOG", "changelog", "releases"):
        return VerificationStatus.PARTIALLY_VERIFIED, 8, "Changelog evidence submitted"
    return None


def _verify_merged_pr(ctx: VerificationContext) -> Verdict:
    merged = _count_in_period(ctx, SignalKind.PR_MERGED)
    if merged >= 1:
        points = 15 if merged >= 3 else 10
        return VerificationStatus.VERIFIED, points, f"{merged} PR(s) merged"

    opened = _count_in_period(ctx, SignalKind.PR_OPENED)
    if opened > 0:
        return VerificationStatus.PARTIALLY_VERIFIED, 5, f"{opened} PR(s) opened but not merged"
    return None


def _verify_closed_issues(ctx: VerificationContext) -> Verdict:
    closed = _count_in_period(ctx, SignalKind.ISSUE_CLOSED)
    if closed >= 2:
        return VerificationStatus.VERIFIED, 12, f"{closed} issues closed"
    if closed == 1:
        return VerificationStatus.PARTIALLY_VERIFIED, 6, "1 issue closed"
    return None


def _verify_readme(ctx: VerificationContext) -> Verdict:
    if _count_in_period(ctx, SignalKind.README_UPDATED) > 0:
        return VerificationStatus.VERIFIED, 8, "README updated via commit"
    if any(e.url and "readme" in e.url.lower() for e in ctx.evidence):
        return VerificationStatus.PARTIALLY_VERIFIED, 5, "README evidence submitted"
    return None


def _verify_ci_green(ctx: VerificationContext) -> Verdict:
    if _count_in_period(ctx, SignalKind.ACTIONS_WORKFLOW_PASSED) > 0:
        return VerificationStatus.VERIFIED, 10, "GitHub Actions workflow passed"
    return None


def _verify_pages_deploy(ctx: VerificationContext) -> Verdict:
    if _count_in_period(ctx, SignalKind.PAGES_DEPLOYED) > 0:
        return VerificationStatus.VERIFIED, 15, "GitHub Pages deployed"
    if ctx.evidence:
        return VerificationStatus.PARTIALLY_VERIFIED, 10, "Pages URL evidence submitted"
    return None


def _verify_topics(ctx: VerificationContext) -> Verdict:
    latest = ctx.snapshots[0] if ctx.snapshots else None
    if latest is not None and len(latest.topics) >= REQUIRED_TOPICS:
        return VerificationStatus.VERIFIED, 8, f"{len(latest.topics)} topics added"
    if ctx.evidence:
        return VerificationStatus.PARTIALLY_VERIFIED, 4, "Topics evidence submitted"
    return None


def _verify_pages_setup(ctx: VerificationContext) -> Verdict:
    # Showcase task: any deployment ever counts
    if any(s.kind == SignalKind.PAGES_DEPLOYED.value for s in ctx.signals):
        return VerificationStatus.VERIFIED, 15, "GitHub Pages set up"
    if ctx.evidence:
        return VerificationStatus.PARTIALLY_VERIFIED, 10, "Pages setup evidence submitted"
    return None


def _verify_manual_review(ctx: VerificationContext) -> Verdict:
    if ctx.evidence:
        return VerificationStatus.PARTIALLY_VERIFIED, 5, "Evidence submitted for manual review"
    return None


TASK_VERIFIERS: Dict[str, TaskVerifier] = {
    "GHW_COMMIT_3DAYS": _verify_commit_days,
    "GHW_WEEKLY_CHANGELOG": _verify_changelog,
    "GHW_MERGE_1PR": _verify_merged_pr,
    "GHW_CLOSE_2ISSUES": _verify_closed_issues,
    "GHW_README_TWEAK": _verify_readme,
    "GHW_CI_GREEN": _verify_ci_green,
    "GHW_PAGES_DEPLOY": _verify_pages_deploy,
    "GHS_ADD_TOPICS": _verify_topics,
    "GHS_PAGES_SETUP": _verify_pages_setup,
}


def verify_weekly_task(task_code: str, ctx: VerificationContext) -> WeeklyTaskVerification:
    """Score one task for one week from signals, snapshots and evidence."""
    status = VerificationStatus.SUBMITTED if ctx.evidence else VerificationStatus.NOT_STARTED

    verifier = TASK_VERIFIERS.get(task_code, _verify_manual_review)
    verdict = verifier(ctx)

    if verdict is None:
        return WeeklyTaskVerification(task_code=task_code, status=status)

    status, points, note = verdict
    logger.debug(
        "weekly_task_verified",
        task_code=task_code,
        status=status.value,
        points=points,
    )
    return WeeklyTaskVerification(
        task_code=task_code,
        status=status,
        points=points,
        notes=[note],
    )
