"""Developer recommendation for issue assignment.

Five additive, independently capped factors (project membership, relevant
experience, current workload, fix quality, resolution speed) produce a
bounded composite score per developer.
"""

from __future__ import annotations

import asyncio
import logging

from devperf_app.analytics.metrics.numeric import mean_of_present, round_half_up
from devperf_app.core.config import EngineSettings
from devperf_app.core.models import DeveloperModel, DeveloperScore
from devperf_app.core.requests import MatchRequest
from devperf_app.core.settings import load_engine_settings
from devperf_app.core.status import is_active_status
from devperf_app.core.store import HistoryStore, IssueQuery

logger = logging.getLogger(__name__)

PROJECT_MEMBER_POINTS = 30

EXPERIENCE_POINTS_PER_ISSUE = 5
EXPERIENCE_CAP = 25

WORKLOAD_BASE_POINTS = 20
WORKLOAD_PENALTY_PER_ISSUE = 4
HEAVY_WORKLOAD = 5  # more active issues than this => low availability
MODERATE_WORKLOAD = 2

QUALITY_MULTIPLIER = 3  # 1..5 average => 3..15 points
HIGH_QUALITY_AVERAGE = 4

FAST_RESOLUTION_HOURS = 24
FAST_RESOLUTION_POINTS = 10
STEADY_RESOLUTION_HOURS = 48
STEADY_RESOLUTION_POINTS = 5


def experience_points(similar_resolved: int) -> int:
    return min(EXPERIENCE_CAP, EXPERIENCE_POINTS_PER_ISSUE * similar_resolved)


def workload_points(active_issues: int) -> int:
    return max(0, WORKLOAD_BASE_POINTS - WORKLOAD_PENALTY_PER_ISSUE * active_issues)


def availability_for(active_issues: int) -> tuple[str, str]:
    """Availability tier and the matching reason text."""
    if active_issues > HEAVY_WORKLOAD:
        return "low", f"Heavy workload ({active_issues} active issues)"
    if active_issues > MODERATE_WORKLOAD:
        return "medium", f"Moderate workload ({active_issues} active issues)"
    return "high", f"Available ({active_issues} active issues)"


def speed_points(avg_hours: float | None) -> int:
    if avg_hours is None:
        return 0
    if avg_hours < FAST_RESOLUTION_HOURS:
        return FAST_RESOLUTION_POINTS
    if avg_hours < STEADY_RESOLUTION_HOURS:
        return STEADY_RESOLUTION_POINTS
    return 0


async def score_developer(
    store: HistoryStore,
    developer: DeveloperModel,
    request: MatchRequest,
    settings: EngineSettings,
) -> DeveloperScore:
    similar_resolved, rated, timed = await asyncio.gather(
        store.count_issues(
            IssueQuery(
                assigned_to_id=developer.id,
                severity=request.severity,
                status="resolved",
                project_id=request.project_id,
            )
        ),
        store.find_issues(
            IssueQuery(
                assigned_to_id=developer.id,
                status="resolved",
                fix_quality_present=True,
                order_by="resolved_at",
                limit=settings.recent_issue_limit,
            )
        ),
        store.find_issues(
            IssueQuery(
                assigned_to_id=developer.id,
                status="resolved",
                project_id=request.project_id,
                resolution_time_present=True,
                order_by="resolved_at",
                limit=settings.recent_issue_limit,
            )
        ),
    )

    score = 0.0
    reasons: list[str] = []

    if request.project_id in developer.project_ids:
        score += PROJECT_MEMBER_POINTS
        reasons.append("Assigned to this project")
    else:
        reasons.append("Not on project team")

    if similar_resolved > 0:
        score += experience_points(similar_resolved)
        reasons.append(f"Resolved {similar_resolved} similar {request.severity} issues")

    workload = sum(1 for issue in developer.issues if is_active_status(issue.status))
    score += workload_points(workload)
    availability, workload_reason = availability_for(workload)
    reasons.append(workload_reason)

    if rated:
        avg_quality = mean_of_present(issue.fix_quality for issue in rated)
        score += avg_quality * QUALITY_MULTIPLIER
        if avg_quality >= HIGH_QUALITY_AVERAGE:
            reasons.append(f"High quality fixes (avg {avg_quality:.1f}/5)")

    avg_hours = mean_of_present(issue.resolution_time for issue in timed) if timed else None
    score += speed_points(avg_hours)
    if avg_hours is not None and avg_hours < FAST_RESOLUTION_HOURS:
        reasons.append(f"Fast resolver (avg {int(round_half_up(avg_hours))}h)")

    return DeveloperScore(
        developer_id=developer.id,
        developer_name=developer.name,
        score=int(round_half_up(score)),
        reasons=reasons,
        current_workload=workload,
        availability=availability,
        estimated_time=avg_hours or None,
    )


async def recommend_developers(
    store: HistoryStore,
    request: MatchRequest,
    *,
    settings: EngineSettings | None = None,
) -> list[DeveloperScore]:
    """Rank every developer for the issue described by ``request``. Never raises."""
    settings = settings or load_engine_settings()
    try:
        developers = await store.find_developers()
        if not developers:
            return []
        scores = await asyncio.gather(
            *(score_developer(store, dev, request, settings) for dev in developers)
        )
    except Exception as exc:
        logger.warning("Developer matching failed for %s: %s", request, exc)
        return []
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    logger.debug("Ranked %s developers for project %s", len(ranked), request.project_id)
    return ranked
