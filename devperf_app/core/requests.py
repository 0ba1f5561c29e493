"""Validated request objects built from camelCase dispatch payloads."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .config import SEVERITY_LEVELS, normalize_severity
from .errors import InvalidRequestError


def _optional_id(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_fields(payload: Mapping[str, Any] | None) -> tuple[str, str]:
    if not isinstance(payload, Mapping):
        raise InvalidRequestError("Request payload must be a mapping")
    raw_severity = payload.get("severity")
    severity = normalize_severity(raw_severity)
    if severity is None:
        raise InvalidRequestError(
            f"Invalid severity {raw_severity!r}; expected one of {', '.join(SEVERITY_LEVELS)}",
            details={"field": "severity"},
        )
    project_id = _optional_id(payload, "projectId")
    if project_id is None:
        raise InvalidRequestError("projectId is required", details={"field": "projectId"})
    return severity, project_id


@dataclass(slots=True, frozen=True)
class PredictionRequest:
    severity: str
    project_id: str
    assigned_to_id: str | None = None
    feature_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> PredictionRequest:
        severity, project_id = _required_fields(payload)
        return cls(
            severity=severity,
            project_id=project_id,
            assigned_to_id=_optional_id(payload, "assignedToId"),
            feature_id=_optional_id(payload, "featureId"),
        )


@dataclass(slots=True, frozen=True)
class MatchRequest:
    severity: str
    project_id: str
    feature_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> MatchRequest:
        severity, project_id = _required_fields(payload)
        return cls(
            severity=severity,
            project_id=project_id,
            feature_id=_optional_id(payload, "featureId"),
        )
