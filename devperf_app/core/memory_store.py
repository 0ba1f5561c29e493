"""DataFrame-backed HistoryStore over an in-memory snapshot of records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import Any

import pandas as pd

from .errors import StoreQueryError
from .mappers import as_utc_timestamp, issues_to_dataframe, map_developer, map_feature, map_issue
from .models import DeveloperModel, FeatureModel, IssueModel
from .store import ORDERABLE_FIELDS, IssueQuery


class InMemoryHistoryStore:
    """Serve store queries from a fixed in-memory snapshot.

    Returned models are the snapshot's own instances (issues) or fresh copies
    carrying their related issues (developers, features); callers must treat
    them as read-only.
    """

    def __init__(
        self,
        issues: Iterable[IssueModel] = (),
        developers: Iterable[DeveloperModel] = (),
        features: Iterable[FeatureModel] = (),
    ):
        self._issues: list[IssueModel] = list(issues)
        self._developers: list[DeveloperModel] = list(developers)
        self._features: list[FeatureModel] = list(features)
        self._frame = issues_to_dataframe(self._issues)

    @classmethod
    def from_records(
        cls,
        issues: Iterable[dict[str, Any]] = (),
        developers: Iterable[dict[str, Any]] = (),
        features: Iterable[dict[str, Any]] = (),
    ) -> InMemoryHistoryStore:
        """Build a store from raw camelCase records as exported by the application."""
        return cls(
            issues=[map_issue(r) for r in issues],
            developers=[map_developer(r) for r in developers],
            features=[map_feature(r) for r in features],
        )

    # ------------------ HistoryStore ------------------
    async def find_issues(self, query: IssueQuery) -> list[IssueModel]:
        selected = self._select(query)
        return [self._issues[pos] for pos in selected.index]

    async def count_issues(self, query: IssueQuery) -> int:
        return int(len(self._select(query)))

    async def find_developers(self) -> list[DeveloperModel]:
        by_assignee: dict[str, list[IssueModel]] = {}
        for issue in self._issues:
            if issue.assigned_to_id:
                by_assignee.setdefault(issue.assigned_to_id, []).append(issue)
        return [replace(dev, issues=by_assignee.get(dev.id, [])) for dev in self._developers]

    async def find_features(self) -> list[FeatureModel]:
        by_feature: dict[str, list[IssueModel]] = {}
        for issue in self._issues:
            if issue.feature_id:
                by_feature.setdefault(issue.feature_id, []).append(issue)
        return [replace(feat, issues=by_feature.get(feat.id, [])) for feat in self._features]

    # ------------------ Internal Helpers ------------------
    def _select(self, query: IssueQuery) -> pd.DataFrame:
        if query.order_by is not None and query.order_by not in ORDERABLE_FIELDS:
            raise StoreQueryError(f"Cannot order issues by {query.order_by!r}")
        df = self._frame
        if df.empty:
            return df
        mask = pd.Series(True, index=df.index)

        statuses = query.statuses()
        if statuses is not None:
            mask &= df["status"].isin(statuses)
        for column, value in (
            ("severity", query.severity),
            ("project_id", query.project_id),
            ("assigned_to_id", query.assigned_to_id),
            ("feature_id", query.feature_id),
        ):
            if value is not None:
                mask &= df[column] == value

        # NaT never satisfies a comparison, so open issues drop out of resolved_* bounds
        if query.resolved_after is not None:
            mask &= df["resolved_at"] >= as_utc_timestamp(query.resolved_after)
        if query.resolved_before is not None:
            mask &= df["resolved_at"] < as_utc_timestamp(query.resolved_before)
        if query.created_after is not None:
            mask &= df["created_at"] >= as_utc_timestamp(query.created_after)
        if query.created_before is not None:
            mask &= df["created_at"] < as_utc_timestamp(query.created_before)

        if query.resolution_time_present:
            mask &= df["resolution_time"].notna()
        if query.fix_quality_present:
            mask &= df["fix_quality"].notna()

        out = df[mask]
        if query.order_by is not None:
            out = out.sort_values(
                by=query.order_by,
                ascending=not query.descending,
                na_position="last",
                kind="mergesort",
            )
        if query.limit is not None:
            out = out.head(query.limit)
        return out
