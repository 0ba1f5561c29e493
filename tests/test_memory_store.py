from datetime import UTC, datetime, timedelta

import pytest

from devperf_app.core.errors import StoreQueryError
from devperf_app.core.memory_store import InMemoryHistoryStore
from devperf_app.core.models import DeveloperModel, FeatureModel, IssueModel
from devperf_app.core.store import IssueQuery

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _sample_store():
    issues = [
        IssueModel(
            id="I-1",
            severity="high",
            status="resolved",
            project_id="p1",
            created_at=NOW - timedelta(days=20),
            resolved_at=NOW - timedelta(days=18),
            resolution_time=48.0,
            fix_quality=4,
            assigned_to_id="d1",
            feature_id="f1",
        ),
        IssueModel(
            id="I-2",
            severity="high",
            status="resolved",
            project_id="p1",
            created_at=NOW - timedelta(days=10),
            resolved_at=NOW - timedelta(days=9),
            resolution_time=24.0,
            assigned_to_id="d1",
        ),
        IssueModel(
            id="I-3",
            severity="low",
            status="open",
            project_id="p2",
            created_at=NOW - timedelta(days=3),
            assigned_to_id="d2",
            feature_id="f1",
        ),
        IssueModel(
            id="I-4",
            severity="critical",
            status="in_progress",
            project_id="p1",
            created_at=NOW - timedelta(days=1),
            assigned_to_id="d1",
        ),
    ]
    developers = [
        DeveloperModel(id="d1", name="Ada", project_ids=["p1"]),
        DeveloperModel(id="d2", name="Linus", project_ids=["p2"]),
        DeveloperModel(id="d3", name="Grace"),
    ]
    features = [
        FeatureModel(id="f1", name="Login", created_at=NOW - timedelta(days=60), project_id="p1"),
        FeatureModel(id="f2", name="Billing", created_at=NOW - timedelta(days=30), project_id="p1"),
    ]
    return InMemoryHistoryStore(issues, developers, features)


def _ids(issues):
    return [i.id for i in issues]


@pytest.mark.asyncio
async def test_find_issues_filters():
    store = _sample_store()
    assert _ids(await store.find_issues(IssueQuery(status="resolved"))) == ["I-1", "I-2"]
    assert _ids(await store.find_issues(IssueQuery(status=["open", "in_progress"]))) == ["I-3", "I-4"]
    assert _ids(await store.find_issues(IssueQuery(severity="high", assigned_to_id="d1"))) == ["I-1", "I-2"]
    assert _ids(await store.find_issues(IssueQuery(feature_id="f1", project_id="p2"))) == ["I-3"]
    assert _ids(await store.find_issues(IssueQuery(fix_quality_present=True))) == ["I-1"]
    assert _ids(await store.find_issues(IssueQuery(resolution_time_present=True))) == ["I-1", "I-2"]


@pytest.mark.asyncio
async def test_date_bounds_are_half_open():
    store = _sample_store()
    recent = await store.find_issues(IssueQuery(created_after=NOW - timedelta(days=10)))
    assert _ids(recent) == ["I-2", "I-3", "I-4"]
    older = await store.find_issues(IssueQuery(created_before=NOW - timedelta(days=10)))
    assert _ids(older) == ["I-1"]
    # open issues never match resolved_at bounds
    resolved = await store.find_issues(IssueQuery(resolved_after=NOW - timedelta(days=365)))
    assert _ids(resolved) == ["I-1", "I-2"]
    assert await store.count_issues(IssueQuery(resolved_before=NOW - timedelta(days=10))) == 1


@pytest.mark.asyncio
async def test_naive_bounds_are_treated_as_utc():
    store = _sample_store()
    naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
    assert _ids(await store.find_issues(IssueQuery(created_after=naive))) == ["I-4"]


@pytest.mark.asyncio
async def test_ordering_and_limit():
    store = _sample_store()
    latest = await store.find_issues(IssueQuery(order_by="resolved_at", limit=1))
    assert _ids(latest) == ["I-2"]
    oldest_first = await store.find_issues(IssueQuery(order_by="created_at", descending=False))
    assert _ids(oldest_first) == ["I-1", "I-2", "I-3", "I-4"]
    # unresolved issues sort last regardless of direction
    by_resolution = await store.find_issues(IssueQuery(order_by="resolved_at"))
    assert _ids(by_resolution)[:2] == ["I-2", "I-1"]


@pytest.mark.asyncio
async def test_invalid_ordering_raises_store_error():
    store = _sample_store()
    with pytest.raises(StoreQueryError):
        await store.find_issues(IssueQuery(order_by="severity"))


@pytest.mark.asyncio
async def test_count_issues():
    store = _sample_store()
    assert await store.count_issues(IssueQuery()) == 4
    assert await store.count_issues(IssueQuery(assigned_to_id="d3")) == 0


@pytest.mark.asyncio
async def test_developers_and_features_carry_related_issues():
    store = _sample_store()
    devs = {d.id: d for d in await store.find_developers()}
    assert _ids(devs["d1"].issues) == ["I-1", "I-2", "I-4"]
    assert devs["d3"].issues == []
    assert devs["d2"].project_ids == ["p2"]

    feats = {f.id: f for f in await store.find_features()}
    assert _ids(feats["f1"].issues) == ["I-1", "I-3"]
    assert feats["f2"].issues == []


@pytest.mark.asyncio
async def test_empty_store():
    store = InMemoryHistoryStore()
    assert await store.find_issues(IssueQuery(status="resolved")) == []
    assert await store.count_issues(IssueQuery()) == 0
    assert await store.find_developers() == []
    assert await store.find_features() == []


@pytest.mark.asyncio
async def test_from_records_maps_camel_case_rows():
    store = InMemoryHistoryStore.from_records(
        issues=[
            {
                "id": 1,
                "severity": "Critical",
                "status": "Done",
                "projectId": "p1",
                "createdAt": "2026-05-01T10:00:00Z",
                "resolvedAt": "2026-05-02T10:00:00Z",
                "resolutionTime": "24",
                "fixQuality": 5,
                "isRecurring": True,
                "assignedToId": "d1",
            },
            {
                "id": 2,
                "severity": "high",
                "status": "In Progress",
                "projectId": "p1",
                "createdAt": "2026-05-03T10:00:00Z",
                "resolutionTime": 10,
                "featureId": "",
            },
        ],
        developers=[{"id": "d1", "fullName": "Ada", "projects": [{"id": "p1"}]}],
        features=[{"id": "f1", "name": "Login", "createdAt": "2026-01-01", "projectId": "p1"}],
    )
    resolved = await store.find_issues(IssueQuery(status="resolved"))
    assert len(resolved) == 1
    issue = resolved[0]
    assert issue.id == "1"
    assert issue.severity == "critical"
    assert issue.resolution_time == 24.0
    assert issue.fix_quality == 5
    assert issue.is_recurring is True

    active = await store.find_issues(IssueQuery(status="in_progress"))
    # resolution data is dropped from issues that are not resolved or closed
    assert active[0].resolution_time is None
    assert active[0].feature_id is None

    devs = await store.find_developers()
    assert devs[0].name == "Ada"
    assert devs[0].project_ids == ["p1"]
    assert [i.id for i in devs[0].issues] == ["1"]
    feats = await store.find_features()
    assert feats[0].created_at.year == 2026
