"""Bug hotspot detection: per-feature defect risk scoring and trend labelling."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd
import pytz

from devperf_app.analytics.metrics.numeric import clamp, round_half_up
from devperf_app.analytics.metrics.trend import INCREASING, STABLE, classify_trend
from devperf_app.core.config import ACTIVE_STATUSES, TIMEZONE, EngineSettings
from devperf_app.core.mappers import as_utc_timestamp
from devperf_app.core.models import FeatureModel, Hotspot
from devperf_app.core.settings import load_engine_settings
from devperf_app.core.store import HistoryStore, IssueQuery

logger = logging.getLogger(__name__)

# Risk score weights; recurrence and critical severity dominate raw frequency
DENSITY_WEIGHT = 10
RECURRING_WEIGHT = 30
CRITICAL_WEIGHT = 15
HIGH_WEIGHT = 8
OPEN_RATIO_WEIGHT = 20
MAX_RISK_SCORE = 100

# A feature is reported when it clears this score or has any critical issue
MIN_REPORTED_RISK = 15

URGENT_CRITICAL_COUNT = 3
REFACTOR_RISK = 70
REVIEW_RISK = 60
RECURRENCE_RATE_ALERT = 0.4
MONITOR_RISK = 40

SECONDS_PER_DAY = 86400.0


@dataclass(slots=True)
class FeatureRisk:
    bug_count: int
    bug_density: float
    recurring_rate: float
    critical_count: int
    risk_score: int


def score_feature(
    bug_count: int,
    recurring_count: int,
    critical_count: int,
    high_count: int,
    open_count: int,
    age_days: float,
) -> FeatureRisk:
    """Combine per-feature issue counts into a 0-100 risk score."""
    age_days = max(1.0, age_days)
    bug_density = bug_count / age_days
    recurring_rate = recurring_count / bug_count if bug_count else 0.0
    open_ratio = open_count / bug_count if bug_count else 0.0
    raw = (
        bug_density * DENSITY_WEIGHT
        + recurring_rate * RECURRING_WEIGHT
        + critical_count * CRITICAL_WEIGHT
        + high_count * HIGH_WEIGHT
        + open_ratio * OPEN_RATIO_WEIGHT
    )
    return FeatureRisk(
        bug_count=bug_count,
        bug_density=bug_density,
        recurring_rate=recurring_rate,
        critical_count=critical_count,
        risk_score=int(round_half_up(clamp(raw, 0, MAX_RISK_SCORE))),
    )


def is_reportable(risk: FeatureRisk) -> bool:
    return risk.risk_score > MIN_REPORTED_RISK or risk.critical_count > 0


def recommend(risk_score: int, recurring_rate: float, critical_count: int, trend: str) -> str:
    if critical_count >= URGENT_CRITICAL_COUNT:
        return "URGENT: Multiple critical bugs detected. Immediate code review required."
    if critical_count > 0:
        return "Critical bugs present. Priority attention needed."
    if risk_score > REFACTOR_RISK and trend == INCREASING:
        return "High risk and increasing. Consider refactoring and comprehensive testing."
    if risk_score > REVIEW_RISK:
        return "High risk area. Schedule code review and address technical debt."
    if recurring_rate > RECURRENCE_RATE_ALERT:
        return "High recurrence rate. Root cause analysis recommended."
    if risk_score > MONITOR_RISK:
        return "Moderate risk. Monitor closely and plan improvements."
    if trend == INCREASING:
        return "Bug rate increasing. Review recent changes."
    return "Acceptable risk level. Continue regular monitoring."


def summarize_feature_issues(features: list[FeatureModel]) -> pd.DataFrame:
    """Per-feature issue counts indexed by feature id (features without issues omitted)."""
    rows = [
        {
            "feature_id": feat.id,
            "issue_id": issue.id,
            "is_recurring": bool(issue.is_recurring),
            "is_critical": issue.severity == "critical",
            "is_high": issue.severity == "high",
            "is_open": issue.status in ACTIVE_STATUSES,
        }
        for feat in features
        for issue in feat.issues
    ]
    if not rows:
        return pd.DataFrame()
    frame = pd.DataFrame(rows)
    return frame.groupby("feature_id", sort=False).agg(
        bug_count=("issue_id", "count"),
        recurring=("is_recurring", "sum"),
        critical=("is_critical", "sum"),
        high=("is_high", "sum"),
        open=("is_open", "sum"),
    )


async def feature_trend(
    store: HistoryStore,
    feature_id: str,
    now: datetime,
    window_days: int,
) -> str:
    """Compare issue arrivals in the latest window against the one before it.

    A failed count query yields "stable" rather than failing the whole scan.
    """
    window = timedelta(days=window_days)
    recent_start = now - window
    previous_start = now - 2 * window
    try:
        recent = await store.count_issues(IssueQuery(feature_id=feature_id, created_after=recent_start))
        previous = await store.count_issues(
            IssueQuery(feature_id=feature_id, created_after=previous_start, created_before=recent_start)
        )
    except Exception as exc:
        logger.debug("Trend lookup failed for feature %s, assuming stable: %s", feature_id, exc)
        return STABLE
    return classify_trend(recent, previous)


async def detect_hotspots(
    store: HistoryStore,
    *,
    now: datetime | None = None,
    settings: EngineSettings | None = None,
) -> list[Hotspot]:
    """Score every feature with issues and return reportable hotspots, riskiest first."""
    settings = settings or load_engine_settings()
    now = now or datetime.now(tz=pytz.timezone(TIMEZONE))
    try:
        return await _scan_features(store, now, settings)
    except Exception as exc:
        logger.warning("Hotspot detection failed: %s", exc)
        return []


async def _scan_features(store: HistoryStore, now: datetime, settings: EngineSettings) -> list[Hotspot]:
    now_ts = as_utc_timestamp(now)
    features = await store.find_features()
    stats = summarize_feature_issues(features)
    if stats.empty:
        return []

    candidates: list[tuple[FeatureModel, FeatureRisk]] = []
    for feat in features:
        if feat.id not in stats.index:
            continue
        row = stats.loc[feat.id]
        age_days = (now_ts - as_utc_timestamp(feat.created_at)).total_seconds() / SECONDS_PER_DAY
        risk = score_feature(
            bug_count=int(row["bug_count"]),
            recurring_count=int(row["recurring"]),
            critical_count=int(row["critical"]),
            high_count=int(row["high"]),
            open_count=int(row["open"]),
            age_days=age_days,
        )
        if is_reportable(risk):
            candidates.append((feat, risk))

    trends = await asyncio.gather(
        *(feature_trend(store, feat.id, now, settings.trend_window_days) for feat, _ in candidates)
    )

    hotspots = [
        Hotspot(
            id=feat.id,
            name=feat.name,
            bug_count=risk.bug_count,
            bug_density=round_half_up(risk.bug_density, 2),
            recurring_rate=round_half_up(risk.recurring_rate, 2),
            critical_count=risk.critical_count,
            risk_score=risk.risk_score,
            trend=trend,
            recommendation=recommend(risk.risk_score, risk.recurring_rate, risk.critical_count, trend),
        )
        for (feat, risk), trend in zip(candidates, trends)
    ]
    hotspots.sort(key=lambda h: h.risk_score, reverse=True)
    logger.debug("Detected %s hotspots across %s features", len(hotspots), len(features))
    return hotspots
