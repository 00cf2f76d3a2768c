"""
LevelUp Rules API — FastAPI endpoints.

Exposes the rule engine to the web app and its edge functions for:
- Time window checks, bonuses and urgency
- Evidence file validation
- GitHub evidence, task windows and weekly verification
- Badge progression
- Task availability
"""

from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from levelup_rules.badges.engine import BadgeProgressionEngine
from levelup_rules.config import Settings, get_settings
from levelup_rules.evidence import validator as evidence
from levelup_rules.evidence.verification import verify_weekly_task
from levelup_rules.files import validator as files
from levelup_rules.models.badges import BadgeCategory, BadgeMetricsSnapshot
from levelup_rules.models.evidence import (
    EvidenceSubmission,
    GitHubSignal,
    VerificationContext,
)
from levelup_rules.models.files import FileDescriptor
from levelup_rules.observability.logging import get_logger, setup_logging
from levelup_rules.time_window import availability
from levelup_rules.time_window import evaluator as time_window

logger = get_logger(__name__)


# --- Request/Response Models ---

class TimeWindowRequest(BaseModel):
    action_time: datetime
    window_hours: float = Field(gt=0)
    current_time: Optional[datetime] = None


class FollowUpRequest(BaseModel):
    start_time: datetime                    # Application or interview time
    action_time: Optional[datetime] = None  # Omit for a live countdown
    current_time: Optional[datetime] = None


class BonusWindowRequest(BaseModel):
    application_time: datetime
    follow_up_time: datetime


class TimeBonusRequest(BaseModel):
    action_type: str
    base_time: datetime
    action_time: datetime


class FileValidateRequest(BaseModel):
    file: FileDescriptor
    evidence_type: str = "document"


class EvidenceFilesRequest(BaseModel):
    files: List[FileDescriptor]
    evidence_type: str


class UrlRequest(BaseModel):
    url: str


class RepoNameRequest(BaseModel):
    full_name: str


class TaskWindowRequest(BaseModel):
    task_code: str
    submission_time: datetime
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None


class SignalPeriodRequest(BaseModel):
    signals: List[GitHubSignal]
    period_start: datetime
    period_end: datetime


class WeeklyVerifyRequest(BaseModel):
    task_code: str
    context: VerificationContext


class DueDateRequest(BaseModel):
    due_date: datetime
    admin_extended: bool = False
    now: Optional[datetime] = None


class DayTaskRequest(BaseModel):
    task_title: str
    admin_extended: bool = False
    now: Optional[datetime] = None


# --- Application Factory ---

def create_app(
    settings: Optional[Settings] = None,
    badge_engine: Optional[BadgeProgressionEngine] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    config = settings or get_settings()
    setup_logging(config.log_level, json_output=config.log_json)

    app = FastAPI(
        title="LevelUp Rules API",
        description="Time windows, evidence validation and badge progression",
        version="0.1.0",
    )

    engine = badge_engine or BadgeProgressionEngine()

    app.state.settings = config
    app.state.badge_engine = engine

    @app.get("/health")
    def health():
        return {"status": "ok", "environment": config.environment}

    # === TIME WINDOWS ===

    @app.post("/time/window")
    def check_time_window(req: TimeWindowRequest):
        result = time_window.validate_time_window(
            req.action_time, req.window_hours, req.current_time
        )
        return result.model_dump(mode="json")

    @app.post("/time/follow-up")
    def check_follow_up(req: FollowUpRequest):
        """48-hour follow-up window after an application."""
        result = time_window.validate_48_hour_window(
            req.start_time, req.action_time, req.current_time
        )
        return result.model_dump(mode="json")

    @app.post("/time/thank-you")
    def check_thank_you(req: FollowUpRequest):
        """24-hour thank-you window after an interview."""
        result = time_window.validate_24_hour_thank_you_window(
            req.start_time, req.action_time, req.current_time
        )
        return result.model_dump(mode="json")

    @app.post("/time/bonus-window")
    def check_bonus_window(req: BonusWindowRequest):
        result = time_window.validate_36_hour_bonus_window(
            req.application_time, req.follow_up_time
        )
        return result.model_dump(mode="json")

    @app.post("/time/bonus")
    def time_bonus(req: TimeBonusRequest):
        result = time_window.get_time_based_bonus(
            req.action_type, req.base_time, req.action_time
        )
        return result.model_dump(mode="json")

    @app.get("/time/urgency")
    def urgency(time_remaining_ms: float):
        return {
            "urgency": time_window.get_urgency_level(time_remaining_ms).value,
            "time_remaining": time_window.format_time_remaining(time_remaining_ms),
        }

    # === FILES ===

    @app.get("/files/rules/{evidence_type}")
    def file_rules(evidence_type: str):
        return files.get_validation_rules(evidence_type).model_dump(mode="json")

    @app.post("/files/validate")
    def validate_file(req: FileValidateRequest):
        rules = files.get_validation_rules(req.evidence_type)
        result = files.validate_file(req.file, rules)
        body = result.model_dump(mode="json")
        body["extension_matches"] = files.validate_file_extension(
            req.file.name, req.file.mime_type
        )
        body["formatted_size"] = files.format_file_size(req.file.size_bytes)
        return body

    @app.post("/files/evidence")
    def validate_evidence_files(req: EvidenceFilesRequest):
        partition = files.validate_evidence_files(req.files, req.evidence_type)
        return partition.model_dump(mode="json")

    # === GITHUB EVIDENCE ===

    @app.post("/github/url")
    def github_url(req: UrlRequest):
        return evidence.validate_github_url(req.url).model_dump(mode="json")

    @app.post("/github/repo-name")
    def github_repo_name(req: RepoNameRequest):
        return evidence.validate_repo_full_name(req.full_name).model_dump(mode="json")

    @app.get("/github/tasks/{task_code}")
    def github_task_rule(task_code: str):
        rule = evidence.get_task_rule(task_code)
        if rule is None:
            raise HTTPException(404, "Task code not found")
        return rule.model_dump(mode="json")

    @app.post("/github/evidence")
    def github_evidence(submission: EvidenceSubmission):
        outcome = evidence.validate_submission(submission)
        if not outcome.valid:
            logger.info(
                "evidence_rejected",
                task_code=submission.task_code,
                evidence_kind=submission.evidence_kind.value,
                error=outcome.error,
            )
        return outcome.model_dump(mode="json")

    @app.post("/github/time-window")
    def github_time_window(req: TaskWindowRequest):
        result = evidence.validate_task_time_window(
            req.task_code, req.submission_time, req.period_start, req.period_end
        )
        return result.model_dump(mode="json")

    @app.post("/github/commit-days")
    def github_commit_days(req: SignalPeriodRequest):
        result = evidence.calculate_commit_days(
            req.signals, req.period_start, req.period_end
        )
        return result.model_dump(mode="json")

    @app.post("/github/readme")
    def github_readme(req: SignalPeriodRequest):
        result = evidence.verify_readme_update(
            req.signals, req.period_start, req.period_end
        )
        return result.model_dump(mode="json")

    @app.post("/github/verify")
    def github_verify(req: WeeklyVerifyRequest):
        return verify_weekly_task(req.task_code, req.context).model_dump(mode="json")

    # === BADGES ===

    @app.post("/badges/progression")
    def badge_progression(metrics: BadgeMetricsSnapshot):
        return engine.evaluate(metrics).model_dump(mode="json")

    @app.post("/badges/{category}")
    def badge_category(category: str, metrics: BadgeMetricsSnapshot):
        try:
            badge_category = BadgeCategory(category)
        except ValueError:
            raise HTTPException(404, "Badge category not found")
        return engine.evaluate_category(badge_category, metrics).model_dump(mode="json")

    # === TASK AVAILABILITY ===

    @app.post("/tasks/availability")
    def task_availability(req: DueDateRequest):
        result = availability.get_task_availability_status(
            req.due_date, req.admin_extended, req.now
        )
        return result.model_dump(mode="json")

    @app.post("/tasks/day-availability")
    def task_day_availability(req: DayTaskRequest):
        result = availability.get_task_day_availability(req.task_title, req.now)
        body = result.model_dump(mode="json")
        body["can_interact"] = availability.can_user_interact_with_day_based_task(
            req.task_title, req.admin_extended, req.now
        )
        body["message"] = availability.get_task_availability_message(
            req.task_title, req.admin_extended, req.now
        )
        return body

    return app


# Default application instance
app = create_app()
