"""GitHub evidence submissions, activity signals and verification results."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from levelup_rules.models.files import FileDescriptor


class EvidenceKind(str, Enum):
    URL = "URL"
    SCREENSHOT = "SCREENSHOT"
    FILE = "FILE"


class SignalKind(str, Enum):
    """Activity signals recorded from GitHub webhooks."""

    COMMIT_PUSHED = "COMMIT_PUSHED"
    README_UPDATED = "README_UPDATED"
    RELEASE_PUBLISHED = "RELEASE_PUBLISHED"
    PR_OPENED = "PR_OPENED"
    PR_MERGED = "PR_MERGED"
    ISSUE_CLOSED = "ISSUE_CLOSED"
    ACTIONS_WORKFLOW_PASSED = "ACTIONS_WORKFLOW_PASSED"
    PAGES_DEPLOYED = "PAGES_DEPLOYED"


class VerificationStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    SUBMITTED = "SUBMITTED"
    PARTIALLY_VERIFIED = "PARTIALLY_VERIFIED"
    VERIFIED = "VERIFIED"


class TaskEvidenceRule(BaseModel):
    """Evidence accepted for a GitHub task code."""

    required_kinds: List[EvidenceKind]
    url_patterns: Optional[List[str]] = None    # Regex; any match passes


class EvidenceSubmission(BaseModel):
    task_code: str                          # e.g., "GHW_MERGE_1PR"
    evidence_kind: EvidenceKind
    url: Optional[str] = None
    file: Optional[FileDescriptor] = None


class ValidationOutcome(BaseModel):
    valid: bool
    error: Optional[str] = None


class TaskWindowResult(BaseModel):
    valid: bool
    error: Optional[str] = None
    hours_remaining: Optional[float] = None


class GitHubSignal(BaseModel):
    """A single recorded GitHub activity event."""

    kind: str                               # SignalKind value; unknown kinds are ignored
    happened_at: datetime
    repo: Optional[str] = None
    payload: dict = {}


class RepoSnapshot(BaseModel):
    """Point-in-time capture of repository metadata, newest first."""

    repo: Optional[str] = None
    topics: List[str] = []
    captured_at: Optional[datetime] = None


class CommitDaysResult(BaseModel):
    distinct_days: int
    commit_dates: List[str]                 # YYYY-MM-DD, sorted


class ReadmeUpdateResult(BaseModel):
    updated: bool
    update_count: int
    last_update: Optional[datetime] = None


class VerificationContext(BaseModel):
    """Everything known about one task for one week."""

    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    evidence: List[EvidenceSubmission] = []
    signals: List[GitHubSignal] = []
    snapshots: List[RepoSnapshot] = []


class WeeklyTaskVerification(BaseModel):
    task_code: str
    status: VerificationStatus
    points: int = 0
    notes: List[str] = []
