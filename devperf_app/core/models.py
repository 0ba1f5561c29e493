"""Domain data models for issue history records and engine results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True)
class IssueModel:
    id: str
    severity: str
    status: str
    project_id: str
    created_at: datetime
    is_recurring: bool = False
    resolution_time: float | None = None  # hours
    fix_quality: int | None = None  # 1..5
    resolved_at: datetime | None = None
    feature_id: str | None = None
    assigned_to_id: str | None = None


@dataclass(slots=True)
class DeveloperModel:
    id: str
    name: str
    project_ids: list[str] = field(default_factory=list)
    issues: list[IssueModel] = field(default_factory=list)


@dataclass(slots=True)
class FeatureModel:
    id: str
    name: str
    created_at: datetime
    project_id: str
    issues: list[IssueModel] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Engine results
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class ResolutionPrediction:
    value: int
    confidence: float
    factors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "confidence": self.confidence, "factors": list(self.factors)}


@dataclass(slots=True)
class Hotspot:
    id: str
    name: str
    bug_count: int
    bug_density: float
    recurring_rate: float
    critical_count: int
    risk_score: int
    trend: str
    recommendation: str
    type: str = "feature"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "bugCount": self.bug_count,
            "bugDensity": self.bug_density,
            "recurringRate": self.recurring_rate,
            "criticalCount": self.critical_count,
            "riskScore": self.risk_score,
            "trend": self.trend,
            "recommendation": self.recommendation,
        }


@dataclass(slots=True)
class DeveloperScore:
    developer_id: str
    developer_name: str
    score: int
    reasons: list[str]
    current_workload: int
    availability: str
    estimated_time: float | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "developerId": self.developer_id,
            "developerName": self.developer_name,
            "score": self.score,
            "reasons": list(self.reasons),
            "currentWorkload": self.current_workload,
            "availability": self.availability,
        }
        if self.estimated_time is not None:
            out["estimatedTime"] = self.estimated_time
        return out
