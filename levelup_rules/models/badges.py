"""Badge progression — metrics snapshot in, per-tier progress out."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# Plans that include the digital profile, required to accrue gold profile progress.
PREMIUM_PLANS = ("6 Months Plan", "1 Year Plan")

IT_INDUSTRY = "IT"


class BadgeTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


class BadgeCategory(str, Enum):
    PROFILE = "profile"
    JOBS = "jobs"
    NETWORK = "network"
    GITHUB = "github"


class BadgeMetricsSnapshot(BaseModel):
    """Raw user metrics pulled by the caller from its datastore."""

    resume_progress: float = Field(ge=0, default=0)
    linkedin_profile_progress: float = Field(ge=0, default=0)
    digital_profile_progress: float = Field(ge=0, default=0)
    github_profile_progress: float = Field(ge=0, default=0)
    job_applications: int = Field(ge=0, default=0)
    network_connections: int = Field(ge=0, default=0)
    profile_views: int = Field(ge=0, default=0)
    github_repos: int = Field(ge=0, default=0)
    github_commits: int = Field(ge=0, default=0)
    subscription_plan: Optional[str] = None
    industry: Optional[str] = None          # "IT" or anything else

    @property
    def has_premium_plan(self) -> bool:
        return self.subscription_plan in PREMIUM_PLANS

    @property
    def is_it_industry(self) -> bool:
        return self.industry == IT_INDUSTRY


class BadgeTierResult(BaseModel):
    tier: BadgeTier
    progress_percent: float = Field(ge=0, le=100)
    unlocked: bool
    upgrade_required: bool = False          # Unlocked, but the plan blocks progress


class CategoryProgression(BaseModel):
    category: BadgeCategory
    available: bool = True                  # False: category hidden for this user
    tiers: List[BadgeTierResult] = []

    def tier(self, tier: BadgeTier) -> Optional[BadgeTierResult]:
        return next((t for t in self.tiers if t.tier == tier), None)


class BadgeProgression(BaseModel):
    categories: Dict[BadgeCategory, CategoryProgression]
