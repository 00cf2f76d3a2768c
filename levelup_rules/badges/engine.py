"""
Badge Progression Engine — tiered badge progress from a metrics snapshot.

Tiers are evaluated strictly in order (bronze -> silver -> gold -> diamond)
and each step sees the results already computed for its category, so the
gating rules live next to the tier they gate.

Categories:
  profile  bronze..diamond  resume -> LinkedIn -> digital profile -> GitHub profile
  jobs     silver..diamond  job application count
  network  silver..diamond  connections (+ profile views for diamond)
  github   silver..diamond  repositories + commits, IT industry only

Behavioral Contract:
- Pure: reads the snapshot, returns display/decision values, awards nothing
- Profile tiers above bronze stay at 0 until the tier they depend on is complete
- Gold profile progress needs a premium plan; unlocking gold does not
- Jobs and network unlock each tier at the previous tier's requirement
- The github category is unavailable for non-IT users
"""

from typing import Callable, Dict, List, Tuple

from levelup_rules.models.badges import (
    BadgeCategory,
    BadgeMetricsSnapshot,
    BadgeProgression,
    BadgeTier,
    BadgeTierResult,
    CategoryProgression,
)
from levelup_rules.observability.logging import get_logger

logger = get_logger(__name__)

COMPLETE = 100.0

JOBS_REQUIREMENTS: List[Tuple[BadgeTier, int]] = [
    (BadgeTier.SILVER, 1),
    (BadgeTier.GOLD, 14),
    (BadgeTier.DIAMOND, 30),
]

NETWORK_CONNECTION_REQUIREMENTS: List[Tuple[BadgeTier, int]] = [
    (BadgeTier.SILVER, 25),
    (BadgeTier.GOLD, 50),
    (BadgeTier.DIAMOND, 100),
]
NETWORK_DIAMOND_PROFILE_VIEWS = 1000

# (tier, repositories, commits)
GITHUB_REQUIREMENTS: List[Tuple[BadgeTier, int, int]] = [
    (BadgeTier.SILVER, 1, 5),
    (BadgeTier.GOLD, 3, 50),
    (BadgeTier.DIAMOND, 5, 100),
]

EvaluatedTiers = Dict[BadgeTier, BadgeTierResult]
TierStep = Callable[[BadgeMetricsSnapshot, EvaluatedTiers], BadgeTierResult]


def _capped(value: float) -> float:
    return min(COMPLETE, value)


def _proportional(value: float, target: float) -> float:
    if value >= target:
        return COMPLETE
    return value / target * 100


def _two_part(a: float, a_target: float, b: float, b_target: float) -> float:
    """Complete when both targets are met, otherwise half credit from each side."""
    if a >= a_target and b >= b_target:
        return COMPLETE
    return _capped(a / a_target * 50 + b / b_target * 50)


def _is_complete(result: BadgeTierResult) -> bool:
    return result.progress_percent >= COMPLETE


def _run_steps(
    metrics: BadgeMetricsSnapshot,
    steps: List[Tuple[BadgeTier, TierStep]],
) -> List[BadgeTierResult]:
    evaluated: EvaluatedTiers = {}
    for tier, step in steps:
        evaluated[tier] = step(metrics, evaluated)
    return list(evaluated.values())


# --- Profile ---

def _profile_bronze(m: BadgeMetricsSnapshot, done: EvaluatedTiers) -> BadgeTierResult:
    return BadgeTierResult(
        tier=BadgeTier.BRONZE,
        progress_percent=_capped(m.resume_progress),
        unlocked=True,
    )


def _profile_silver(m: BadgeMetricsSnapshot, done: EvaluatedTiers) -> BadgeTierResult:
    bronze_complete = _is_complete(done[BadgeTier.BRONZE])
    return BadgeTierResult(
        tier=BadgeTier.SILVER,
        progress_percent=_capped(m.linkedin_profile_progress) if bronze_complete else 0,
        unlocked=bronze_complete,
    )


def _profile_gold(m: BadgeMetricsSnapshot, done: EvaluatedTiers) -> BadgeTierResult:
    silver_complete = _is_complete(done[BadgeTier.SILVER])
    accrues = silver_complete and m.has_premium_plan
    return BadgeTierResult(
        tier=BadgeTier.GOLD,
        progress_percent=_capped(m.digital_profile_progress) if accrues else 0,
        unlocked=silver_complete,
        upgrade_required=silver_complete and not m.has_premium_plan,
    )


def _profile_diamond(m: BadgeMetricsSnapshot, done: EvaluatedTiers) -> BadgeTierResult:
    # Gated on silver, not gold: gold may be blocked by the plan alone
    eligible = _is_complete(done[BadgeTier.SILVER]) and m.is_it_industry
    return BadgeTierResult(
        tier=BadgeTier.DIAMOND,
        progress_percent=_capped(m.github_profile_progress) if eligible else 0,
        unlocked=eligible,
    )


PROFILE_STEPS: List[Tuple[BadgeTier, TierStep]] = [
    (BadgeTier.BRONZE, _profile_bronze),
    (BadgeTier.SILVER, _profile_silver),
    (BadgeTier.GOLD, _profile_gold),
    (BadgeTier.DIAMOND, _profile_diamond),
]


def evaluate_profile(metrics: BadgeMetricsSnapshot) -> CategoryProgression:
    return CategoryProgression(
        category=BadgeCategory.PROFILE,
        tiers=_run_steps(metrics, PROFILE_STEPS),
    )


# --- Jobs ---

def _jobs_tiers(job_applications: int) -> List[BadgeTierResult]:
    results = []
    unlock_at = 0
    for tier, required in JOBS_REQUIREMENTS:
        results.append(BadgeTierResult(
            tier=tier,
            progress_percent=_proportional(job_applications, required),
            unlocked=job_applications >= unlock_at,
        ))
        unlock_at = required
    return results


def evaluate_jobs(metrics: BadgeMetricsSnapshot) -> CategoryProgression:
    return CategoryProgression(
        category=BadgeCategory.JOBS,
        tiers=_jobs_tiers(metrics.job_applications),
    )


# --- Network ---

def _network_tiers(connections: int, profile_views: int) -> List[BadgeTierResult]:
    results = []
    unlock_at = 0
    for tier, required in NETWORK_CONNECTION_REQUIREMENTS:
        if tier == BadgeTier.DIAMOND:
            progress = _two_part(
                connections, required, profile_views, NETWORK_DIAMOND_PROFILE_VIEWS
            )
        else:
            progress = _proportional(connections, required)
        results.append(BadgeTierResult(
            tier=tier,
            progress_percent=progress,
            unlocked=connections >= unlock_at,
        ))
        unlock_at = required
    return results


def evaluate_network(metrics: BadgeMetricsSnapshot) -> CategoryProgression:
    return CategoryProgression(
        category=BadgeCategory.NETWORK,
        tiers=_network_tiers(metrics.network_connections, metrics.profile_views),
    )


# --- GitHub ---

def _github_tiers(repos: int, commits: int) -> List[BadgeTierResult]:
    results: List[BadgeTierResult] = []
    for tier, required_repos, required_commits in GITHUB_REQUIREMENTS:
        previous = results[-1] if results else None
        results.append(BadgeTierResult(
            tier=tier,
            progress_percent=_two_part(repos, required_repos, commits, required_commits),
            unlocked=previous is None or _is_complete(previous),
        ))
    return results


def evaluate_github(metrics: BadgeMetricsSnapshot) -> CategoryProgression:
    if not metrics.is_it_industry:
        return CategoryProgression(category=BadgeCategory.GITHUB, available=False)
    return CategoryProgression(
        category=BadgeCategory.GITHUB,
        tiers=_github_tiers(metrics.github_repos, metrics.github_commits),
    )


CATEGORY_EVALUATORS: Dict[BadgeCategory, Callable[[BadgeMetricsSnapshot], CategoryProgression]] = {
    BadgeCategory.PROFILE: evaluate_profile,
    BadgeCategory.JOBS: evaluate_jobs,
    BadgeCategory.NETWORK: evaluate_network,
    BadgeCategory.GITHUB: evaluate_github,
}


def _pick(results: List[BadgeTierResult], tier: BadgeTier) -> float:
    """Progress of one tier; 0 for tiers the category does not have."""
    match = next((r for r in results if r.tier == BadgeTier(tier)), None)
    return match.progress_percent if match else 0.0


def calculate_profile_progress(tier: BadgeTier, metrics: BadgeMetricsSnapshot) -> float:
    return _pick(evaluate_profile(metrics).tiers, tier)


def calculate_jobs_progress(tier: BadgeTier, job_applications: int) -> float:
    return _pick(_jobs_tiers(job_applications), tier)


def calculate_network_progress(
    tier: BadgeTier,
    connections: int,
    profile_views: int = 0,
) -> float:
    return _pick(_network_tiers(connections, profile_views), tier)


def calculate_github_progress(tier: BadgeTier, repos: int, commits: int) -> float:
    return _pick(_github_tiers(repos, commits), tier)


class BadgeProgressionEngine:
    """
    Evaluates every badge category for a user.

    Stateless; the caller persists which badges have actually been awarded.
    """

    def evaluate_category(
        self,
        category: BadgeCategory,
        metrics: BadgeMetricsSnapshot,
    ) -> CategoryProgression:
        return CATEGORY_EVALUATORS[BadgeCategory(category)](metrics)

    def evaluate(self, metrics: BadgeMetricsSnapshot) -> BadgeProgression:
        categories = {
            category: evaluator(metrics)
            for category, evaluator in CATEGORY_EVALUATORS.items()
        }
        logger.debug(
            "badge_progression_evaluated",
            unlocked=sum(
                1 for c in categories.values() for t in c.tiers if t.unlocked
            ),
            github_available=categories[BadgeCategory.GITHUB].available,
        )
        return BadgeProgression(categories=categories)
