"""Status normalization and categorization utilities.

Centralized status handling reused by the store and the estimators. Uses the
workflow vocabulary from config.py (STATUS_ALIASES, STATUS_VALUES,
ACTIVE_STATUSES, TERMINAL_STATUSES).
"""

from __future__ import annotations

from .config import ACTIVE_STATUSES, STATUS_ALIASES, STATUS_VALUES, TERMINAL_STATUSES


def normalize_workflow_status(value: str | None) -> str:
    """Map a raw status string to one of the canonical workflow statuses.

    Returns "unknown" for any unmapped or empty value, which keeps unexpected
    statuses out of both the active and the terminal buckets.

    Examples
    --------
    >>> normalize_workflow_status("In Progress")
    'in_progress'
    >>> normalize_workflow_status("done")
    'resolved'
    >>> normalize_workflow_status("parked")
    'unknown'
    """
    if not value:
        return "unknown"
    text = str(value).strip().lower()
    if text in STATUS_ALIASES:
        return STATUS_ALIASES[text]
    if text in STATUS_VALUES:
        return text
    return "unknown"


def is_active_status(value: str | None) -> bool:
    """True if the status counts toward current workload (open or in progress)."""
    return normalize_workflow_status(value) in ACTIVE_STATUSES


def is_terminal_status(value: str | None) -> bool:
    return normalize_workflow_status(value) in TERMINAL_STATUSES
