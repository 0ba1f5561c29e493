"""InsightsService: validates dispatch payloads and runs the estimators."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from devperf_app.analytics.estimators.developer_match import recommend_developers
from devperf_app.analytics.estimators.hotspots import detect_hotspots
from devperf_app.analytics.estimators.resolution_time import predict_resolution_time

from .config import EngineSettings
from .errors import InsightsError
from .requests import MatchRequest, PredictionRequest
from .settings import load_engine_settings
from .store import HistoryStore

logger = logging.getLogger(__name__)


def _failure(exc: BaseException) -> dict[str, Any]:
    return {"success": False, "error": InsightsError.from_exception(exc).to_dict()}


class InsightsService:
    """Envelope-returning entry points for the dispatch layer.

    Responses are ``{"success": True, <key>: ...}`` or
    ``{"success": False, "error": {...}}``. The estimators never raise, so
    failures here come from payload validation.
    """

    def __init__(self, store: HistoryStore, settings: EngineSettings | None = None):
        self.store = store
        self.settings = settings or load_engine_settings()

    async def predict_resolution_time(
        self,
        payload: Mapping[str, Any],
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        try:
            request = PredictionRequest.from_payload(payload)
        except InsightsError as exc:
            logger.info("Rejected prediction request: %s", exc.message)
            return _failure(exc)
        prediction = await predict_resolution_time(self.store, request, now=now, settings=self.settings)
        logger.info(
            "Predicted %sh for %s issue (confidence %s)",
            prediction.value,
            request.severity,
            prediction.confidence,
        )
        return {"success": True, "prediction": prediction.to_dict()}

    async def detect_hotspots(self, *, now: datetime | None = None) -> dict[str, Any]:
        hotspots = await detect_hotspots(self.store, now=now, settings=self.settings)
        logger.info("Found %s hotspots", len(hotspots))
        return {"success": True, "hotspots": [h.to_dict() for h in hotspots]}

    async def recommend_developers(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        try:
            request = MatchRequest.from_payload(payload)
        except InsightsError as exc:
            logger.info("Rejected developer recommendation request: %s", exc.message)
            return _failure(exc)
        ranked = await recommend_developers(self.store, request, settings=self.settings)
        logger.info("Found %s developer recommendations", len(ranked))
        return {"success": True, "recommendations": [r.to_dict() for r in ranked]}

    async def overview(
        self,
        payload: Mapping[str, Any],
        *,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Run all three estimators concurrently for one draft issue."""
        try:
            prediction_request = PredictionRequest.from_payload(payload)
            match_request = MatchRequest.from_payload(payload)
        except InsightsError as exc:
            logger.info("Rejected overview request: %s", exc.message)
            return _failure(exc)
        prediction, ranked, hotspots = await asyncio.gather(
            predict_resolution_time(self.store, prediction_request, now=now, settings=self.settings),
            recommend_developers(self.store, match_request, settings=self.settings),
            detect_hotspots(self.store, now=now, settings=self.settings),
        )
        return {
            "success": True,
            "prediction": prediction.to_dict(),
            "recommendations": [r.to_dict() for r in ranked],
            "hotspots": [h.to_dict() for h in hotspots],
        }
