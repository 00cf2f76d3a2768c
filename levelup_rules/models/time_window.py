"""Time window results — deadlines, bonuses and task availability."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UrgencyLevel(str, Enum):
    CRITICAL = "critical"   # <= 2h left
    HIGH = "high"           # <= 6h left
    MEDIUM = "medium"       # <= 24h left
    LOW = "low"


class TimeValidationResult(BaseModel):
    """Outcome of checking an action against a deadline window."""

    is_valid: bool
    is_expired: bool
    time_remaining_ms: Optional[float] = None   # Only set in countdown mode
    message: str


class BonusRule(BaseModel):
    """Entry in the time-based bonus table."""

    threshold_hours: float = Field(gt=0)
    bonus_points: int = Field(ge=0)
    label: str                              # e.g., "Follow-up"


class TimeBonus(BaseModel):
    eligible: bool
    bonus_points: int = 0
    reason: str


class AvailabilityStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"             # Due date passed, still extendable this week
    WEEK_EXPIRED = "week_expired"   # Week is over, extension impossible


class TaskAvailability(BaseModel):
    """Whether a user can still start or submit a due-dated task."""

    can_interact: bool
    status: AvailabilityStatus
    message: str


class TaskDayAvailability(BaseModel):
    """Availability of a "Day N" task relative to the current weekday."""

    is_available: bool
    is_past_due: bool
    is_future_day: bool
    can_request_extension: bool
    day_of_week: int = Field(ge=1, le=7)    # 1 = Monday, 7 = Sunday
    message: str
