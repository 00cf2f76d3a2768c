"""LevelUp rules data models."""

from levelup_rules.models.badges import (
    BadgeCategory,
    BadgeMetricsSnapshot,
    BadgeProgression,
    BadgeTier,
    BadgeTierResult,
    CategoryProgression,
)
from levelup_rules.models.evidence import (
    CommitDaysResult,
    EvidenceKind,
    EvidenceSubmission,
    GitHubSignal,
    ReadmeUpdateResult,
    RepoSnapshot,
    SignalKind,
    TaskEvidenceRule,
    TaskWindowResult,
    ValidationOutcome,
    VerificationContext,
    VerificationStatus,
    WeeklyTaskVerification,
)
from levelup_rules.models.files import (
    EvidenceFilePartition,
    FileDescriptor,
    FileValidationResult,
    FileValidationRuleSet,
    InvalidFile,
)
from levelup_rules.models.time_window import (
    AvailabilityStatus,
    BonusRule,
    TaskAvailability,
    TaskDayAvailability,
    TimeBonus,
    TimeValidationResult,
    UrgencyLevel,
)

__all__ = [
    "AvailabilityStatus",
    "BadgeCategory",
    "BadgeMetricsSnapshot",
    "BadgeProgression",
    "BadgeTier",
    "BadgeTierResult",
    "BonusRule",
    "CategoryProgression",
    "CommitDaysResult",
    "EvidenceFilePartition",
    "EvidenceKind",
    "EvidenceSubmission",
    "FileDescriptor",
    "FileValidationResult",
    "FileValidationRuleSet",
    "GitHubSignal",
    "InvalidFile",
    "ReadmeUpdateResult",
    "RepoSnapshot",
    "SignalKind",
    "TaskAvailability",
    "TaskDayAvailability",
    "TaskEvidenceRule",
    "TaskWindowResult",
    "TimeBonus",
    "TimeValidationResult",
    "UrgencyLevel",
    "ValidationOutcome",
    "VerificationContext",
    "VerificationStatus",
    "WeeklyTaskVerification",
]
