"""Read-only historical-record store interface consumed by the estimators."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from .models import DeveloperModel, FeatureModel, IssueModel

ORDERABLE_FIELDS: frozenset[str] = frozenset({"resolved_at", "created_at"})


@dataclass(slots=True, frozen=True)
class IssueQuery:
    """Filter for issue lookups. Unset fields do not constrain the result.

    Date bounds follow the usual half-open convention: ``*_after`` is
    inclusive (>=) and ``*_before`` is exclusive (<).
    """

    status: str | Sequence[str] | None = None
    severity: str | None = None
    project_id: str | None = None
    assigned_to_id: str | None = None
    feature_id: str | None = None
    resolved_after: datetime | None = None
    resolved_before: datetime | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    resolution_time_present: bool = False
    fix_quality_present: bool = False
    order_by: str | None = None
    descending: bool = True
    limit: int | None = None

    def statuses(self) -> tuple[str, ...] | None:
        if self.status is None:
            return None
        if isinstance(self.status, str):
            return (self.status,)
        return tuple(self.status)


class HistoryStore(Protocol):
    """Protocol every historical-record collaborator implements.

    Implementations raise ``StoreQueryError`` (or any exception) on read
    failures; the estimators convert those into their fallback results.
    """

    async def find_issues(self, query: IssueQuery) -> list[IssueModel]: ...

    async def count_issues(self, query: IssueQuery) -> int: ...

    async def find_developers(self) -> list[DeveloperModel]:
        """Return every developer with assigned issues and project memberships."""
        ...

    async def find_features(self) -> list[FeatureModel]:
        """Return every feature with its issues and parent project id."""
        ...
