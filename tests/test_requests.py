import pytest

from devperf_app.core.errors import ErrorCode, InsightsError, InvalidRequestError, StoreQueryError
from devperf_app.core.mappers import map_issue
from devperf_app.core.requests import MatchRequest, PredictionRequest


def test_prediction_request_from_payload():
    req = PredictionRequest.from_payload(
        {"severity": " Blocker ", "projectId": "p1", "assignedToId": "d1", "featureId": ""}
    )
    assert req == PredictionRequest(severity="critical", project_id="p1", assigned_to_id="d1", feature_id=None)


def test_match_request_ignores_assignee():
    req = MatchRequest.from_payload({"severity": "minor", "projectId": 7, "assignedToId": "d1"})
    assert req == MatchRequest(severity="low", project_id="7")


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"projectId": "p1"}, "severity"),
        ({"severity": "huge", "projectId": "p1"}, "severity"),
        ({"severity": "high"}, "projectId"),
        ({"severity": "high", "projectId": "  "}, "projectId"),
    ],
)
def test_invalid_payloads(payload, field):
    with pytest.raises(InvalidRequestError) as info:
        PredictionRequest.from_payload(payload)
    assert info.value.code is ErrorCode.VALIDATION_ERROR
    assert info.value.details == {"field": field}


def test_error_wrapping():
    wrapped = InsightsError.from_exception(RuntimeError("boom"))
    assert wrapped.code is ErrorCode.INTERNAL_ERROR
    assert wrapped.to_dict()["details"] == {"type": "RuntimeError"}
    store_err = StoreQueryError()
    assert InsightsError.from_exception(store_err) is store_err
    assert store_err.to_dict()["message"] == "Failed to read historical records"


def test_map_issue_defaults():
    issue = map_issue({"id": "x", "status": "weird", "projectId": "p1", "createdAt": "not a date"})
    assert issue.status == "unknown"
    assert issue.severity == "medium"
    assert issue.created_at is None
    assert issue.is_recurring is False
