"""Heuristic estimators over issue history."""

from devperf_app.analytics.estimators.developer_match import recommend_developers
from devperf_app.analytics.estimators.hotspots import detect_hotspots
from devperf_app.analytics.estimators.resolution_time import predict_resolution_time

__all__ = [
    "detect_hotspots",
    "predict_resolution_time",
    "recommend_developers",
]
