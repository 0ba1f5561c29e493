"""Central configuration: vocabularies and tunable engine settings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Time Reference
# =============================================================================
TIMEZONE = "UTC"

# =============================================================================
# Severity Configuration
# =============================================================================
# Canonical ordering, least to most urgent
SEVERITY_LEVELS: Sequence[str] = ("low", "medium", "high", "critical")

# Keys should be lowercase for case-insensitive matching
SEVERITY_ALIASES: dict[str, str] = {
    "low": "low",
    "minor": "low",
    "trivial": "low",
    "medium": "medium",
    "normal": "medium",
    "moderate": "medium",
    "high": "high",
    "major": "high",
    "critical": "critical",
    "blocker": "critical",
    "urgent": "critical",
}

# =============================================================================
# Workflow Status Configuration
# =============================================================================
STATUS_VALUES: Sequence[str] = ("open", "in_progress", "resolved", "closed")

# Statuses that count toward a developer's current workload
ACTIVE_STATUSES: frozenset[str] = frozenset({"open", "in_progress"})

# Statuses that may carry resolution time and fix quality
TERMINAL_STATUSES: frozenset[str] = frozenset({"resolved", "closed"})

STATUS_ALIASES: dict[str, str] = {
    "open": "open",
    "new": "open",
    "to do": "open",
    "todo": "open",
    "reopened": "open",
    "in_progress": "in_progress",
    "in progress": "in_progress",
    "in-progress": "in_progress",
    "inprogress": "in_progress",
    "resolved": "resolved",
    "done": "resolved",
    "fixed": "resolved",
    "closed": "closed",
    "cancelled": "closed",
    "canceled": "closed",
}


def normalize_severity(severity: str | None) -> str | None:
    """Normalize a severity label to its canonical lowercase form.

    Parameters
    ----------
    severity : str or None
        Raw severity string (any casing, surrounding whitespace allowed).

    Returns
    -------
    str or None
        One of ``SEVERITY_LEVELS``, or None when the value is empty or unknown.
    """
    if severity is None:
        return None
    cleaned = str(severity).strip().lower()
    if not cleaned:
        return None
    return SEVERITY_ALIASES.get(cleaned)


# =============================================================================
# Tunable Engine Settings
# =============================================================================
@dataclass(slots=True, frozen=True)
class EngineSettings:
    history_months: int = 6  # resolved-issue lookback for the predictor
    min_history: int = 10  # below this, the predictor returns severity defaults
    neighbor_count: int = 10
    trend_window_days: int = 30
    recent_issue_limit: int = 20  # sample size for quality/speed factors


SETTINGS = EngineSettings()
