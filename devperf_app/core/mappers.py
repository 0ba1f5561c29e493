"""Mapping raw store records (camelCase dicts) into models and DataFrames."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from typing import Any

import pandas as pd
import pytz

from .config import normalize_severity
from .models import DeveloperModel, FeatureModel, IssueModel
from .status import is_terminal_status, normalize_workflow_status

ISSUE_COLUMNS: tuple[str, ...] = (
    "id",
    "severity",
    "status",
    "project_id",
    "created_at",
    "is_recurring",
    "resolution_time",
    "fix_quality",
    "resolved_at",
    "feature_id",
    "assigned_to_id",
)


def as_utc_timestamp(value) -> pd.Timestamp:
    """Coerce a datetime-like value to a UTC Timestamp, localizing naive values."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize(pytz.UTC)
    return ts.tz_convert(pytz.UTC)


def parse_dt(val):
    if val is None or val == "":
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _parse_number(val) -> float | None:
    if val is None:
        return None
    num = pd.to_numeric(val, errors="coerce")
    if pd.isna(num):
        return None
    return float(num)


def _optional_str(val) -> str | None:
    if val is None:
        return None
    text = str(val).strip()
    return text or None


def map_issue(raw: dict[str, Any]) -> IssueModel:
    status = normalize_workflow_status(raw.get("status"))
    severity = normalize_severity(raw.get("severity")) or "medium"
    resolution_time = _parse_number(raw.get("resolutionTime"))
    quality = _parse_number(raw.get("fixQuality"))
    # Resolution data is only meaningful on resolved/closed issues
    if not is_terminal_status(status):
        resolution_time = None
        quality = None
    return IssueModel(
        id=str(raw.get("id")),
        severity=severity,
        status=status,
        project_id=str(raw.get("projectId")),
        created_at=parse_dt(raw.get("createdAt")),
        is_recurring=bool(raw.get("isRecurring") or False),
        resolution_time=resolution_time,
        fix_quality=int(quality) if quality is not None else None,
        resolved_at=parse_dt(raw.get("resolvedAt")),
        feature_id=_optional_str(raw.get("featureId")),
        assigned_to_id=_optional_str(raw.get("assignedToId")),
    )


def map_developer(raw: dict[str, Any]) -> DeveloperModel:
    projects = raw.get("projectIds")
    if projects is None:
        projects = [p.get("id") for p in raw.get("projects") or [] if isinstance(p, dict)]
    return DeveloperModel(
        id=str(raw.get("id")),
        name=raw.get("fullName") or raw.get("name") or "",
        project_ids=[str(p) for p in projects if p is not None],
    )


def map_feature(raw: dict[str, Any]) -> FeatureModel:
    return FeatureModel(
        id=str(raw.get("id")),
        name=raw.get("name") or "",
        created_at=parse_dt(raw.get("createdAt")),
        project_id=str(raw.get("projectId")),
    )


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    rows = [asdict(i) for i in issues]
    df = pd.DataFrame(rows, columns=list(ISSUE_COLUMNS))
    for col in ("created_at", "resolved_at"):
        df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    for col in ("resolution_time", "fix_quality"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df["is_recurring"] = df["is_recurring"].astype(bool)
    return df
