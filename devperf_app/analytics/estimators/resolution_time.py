"""Resolution-time prediction via similarity-weighted nearest neighbours.

Each resolved issue from the recent history is encoded as
``[severity rank, same project, same assignee, same feature]`` and compared
with the new issue by cosine similarity. The estimate is the
similarity-weighted mean resolution time of the closest neighbours, and the
confidence shrinks as those neighbours disagree with one another.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

import numpy as np
import pandas as pd
import pytz

from devperf_app.analytics.metrics.numeric import clamp, coefficient_of_variation, round_half_up
from devperf_app.analytics.metrics.similarity import cosine_similarities
from devperf_app.core.config import TIMEZONE, EngineSettings
from devperf_app.core.models import IssueModel, ResolutionPrediction
from devperf_app.core.requests import PredictionRequest
from devperf_app.core.settings import load_engine_settings
from devperf_app.core.store import HistoryStore, IssueQuery

logger = logging.getLogger(__name__)

SEVERITY_RANK: dict[str, int] = {"low": 1, "medium": 2, "high": 3, "critical": 4}
DEFAULT_SEVERITY_RANK = 2

# Fallback estimates in hours when history cannot support a prediction
SEVERITY_DEFAULT_HOURS: dict[str, int] = {"critical": 12, "high": 24, "medium": 48, "low": 72}
FALLBACK_DEFAULT_HOURS = 24

INSUFFICIENT_DATA_CONFIDENCE = 0.3
ERROR_CONFIDENCE = 0.3
NO_SIMILAR_CONFIDENCE = 0.4
MIN_CONFIDENCE = 0.4
MAX_CONFIDENCE = 0.95

HIGH_CONFIDENCE_THRESHOLD = 0.8
MODERATE_CONFIDENCE_THRESHOLD = 0.6
QUICK_RESOLUTION_HOURS = 24
COMPLEX_RESOLUTION_HOURS = 72


def default_estimate(severity: str) -> int:
    return SEVERITY_DEFAULT_HOURS.get(severity, FALLBACK_DEFAULT_HOURS)


def encode_severity(severity: str) -> int:
    return SEVERITY_RANK.get(severity, DEFAULT_SEVERITY_RANK)


def _same(value: str | None, wanted: str | None) -> int:
    # An absent field on the new issue never counts as a match
    return 1 if wanted is not None and value == wanted else 0


def encode_issue(issue: IssueModel, request: PredictionRequest) -> list[int]:
    return [
        encode_severity(issue.severity),
        1 if issue.project_id == request.project_id else 0,
        _same(issue.assigned_to_id, request.assigned_to_id),
        _same(issue.feature_id, request.feature_id),
    ]


def encode_request(request: PredictionRequest) -> list[int]:
    return [
        encode_severity(request.severity),
        1,
        1 if request.assigned_to_id else 0,
        1 if request.feature_id else 0,
    ]


def describe_factors(
    severity: str,
    neighbor_count: int,
    confidence: float,
    predicted_hours: float,
) -> list[str]:
    factors: list[str] = []
    if severity == "critical":
        factors.append("Critical severity - requires immediate attention")
    elif severity == "high":
        factors.append("High priority issue")

    factors.append(f"Based on {neighbor_count} similar resolved issues")

    if confidence > HIGH_CONFIDENCE_THRESHOLD:
        factors.append("High confidence prediction")
    elif confidence > MODERATE_CONFIDENCE_THRESHOLD:
        factors.append("Moderate confidence prediction")
    else:
        factors.append("Limited data - estimate may vary")

    if predicted_hours < QUICK_RESOLUTION_HOURS:
        factors.append("Quick resolution expected")
    elif predicted_hours > COMPLEX_RESOLUTION_HOURS:
        factors.append("Complex issue - may take longer")
    return factors


def estimate_from_neighbors(
    severity: str,
    similarities: Sequence[float],
    resolution_times: Sequence[float],
    *,
    k: int,
) -> ResolutionPrediction:
    """Predict from precomputed similarities against resolved history.

    Keeps the ``k`` most similar issues (ties keep history order) and returns
    their similarity-weighted mean resolution time.
    """
    sims = np.asarray(similarities, dtype=float)
    times = np.asarray(resolution_times, dtype=float)
    order = np.argsort(-sims, kind="stable")[: min(k, sims.size)]
    top_sims = sims[order]
    top_times = times[order]

    total_similarity = float(top_sims.sum())
    if total_similarity == 0:
        return ResolutionPrediction(
            value=default_estimate(severity),
            confidence=NO_SIMILAR_CONFIDENCE,
            factors=["No similar issues found"],
        )

    predicted = float(np.dot(top_sims, top_times)) / total_similarity
    cv = coefficient_of_variation(top_times)
    confidence = clamp(1 - cv / 2, MIN_CONFIDENCE, MAX_CONFIDENCE)
    return ResolutionPrediction(
        value=int(round_half_up(predicted)),
        confidence=round_half_up(confidence, 2),
        factors=describe_factors(severity, int(order.size), confidence, predicted),
    )


async def predict_resolution_time(
    store: HistoryStore,
    request: PredictionRequest,
    *,
    now: datetime | None = None,
    settings: EngineSettings | None = None,
) -> ResolutionPrediction:
    """Estimate hours-to-resolve for a new issue. Never raises."""
    settings = settings or load_engine_settings()
    now = now or datetime.now(tz=pytz.timezone(TIMEZONE))
    since = (pd.Timestamp(now) - pd.DateOffset(months=settings.history_months)).to_pydatetime()

    try:
        return await _predict(store, request, since, settings)
    except Exception as exc:
        logger.warning("Resolution-time prediction failed for %s: %s", request, exc)
        return ResolutionPrediction(
            value=default_estimate(request.severity),
            confidence=ERROR_CONFIDENCE,
            factors=["Error during prediction"],
        )


async def _predict(
    store: HistoryStore,
    request: PredictionRequest,
    since: datetime,
    settings: EngineSettings,
) -> ResolutionPrediction:
    history = await store.find_issues(
        IssueQuery(status="resolved", resolution_time_present=True, resolved_after=since)
    )
    if len(history) < settings.min_history:
        return ResolutionPrediction(
            value=default_estimate(request.severity),
            confidence=INSUFFICIENT_DATA_CONFIDENCE,
            factors=[f"Insufficient historical data (< {settings.min_history} resolved issues)"],
        )

    matrix = np.array([encode_issue(issue, request) for issue in history], dtype=float)
    similarities = cosine_similarities(encode_request(request), matrix)
    prediction = estimate_from_neighbors(
        request.severity,
        similarities,
        [issue.resolution_time for issue in history],
        k=settings.neighbor_count,
    )
    logger.debug(
        "Predicted %sh (confidence %s) from %s resolved issues",
        prediction.value,
        prediction.confidence,
        len(history),
    )
    return prediction
