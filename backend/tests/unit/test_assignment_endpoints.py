from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.core.exceptions import ServiceRequestError

from appraisal_portal.models.review_period import ReviewPeriod
from appraisal_portal.services.directory_service import ASSIGNMENTS, DirectoryServiceError, directory_service

ACTIVE_PERIOD = ReviewPeriod(
    id="p1",
    name="All Time",
    type="Custom",
    year=2025,
    start_date="2000-01-01",
    end_date="2999-12-31",
    status="active",
)

TEMPLATE_MAPPING = {
    "leaderToMember": "tpl-l2m",
    "memberToLeader": "tpl-m2l",
    "leaderToLeader": "tpl-l2l",
    "execToLeader": "tpl-e2l",
}


@pytest.fixture
def directory(small_org):
    with (
        patch.object(directory_service, "initialized", True),
        patch.object(directory_service, "get_review_period", AsyncMock(return_value=ACTIVE_PERIOD)) as period,
        patch.object(directory_service, "get_employees", AsyncMock(return_value=small_org)),
        patch.object(directory_service, "save_assignment", AsyncMock(side_effect=lambda a: a)) as save,
    ):
        yield period, save


def test_preview_endpoint(authenticated_client, directory):
    response = authenticated_client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "p1"})

    assert response.status_code == 200
    data = response.json()
    assert data["leaderToMember"] == [
        {"appraiserId": "l1", "appraiserName": "Lena Lead", "employeeId": "m1", "employeeName": "Mo Member"}
    ]
    assert [r["appraiserId"] for r in data["memberToLeader"]] == ["m1"]
    assert data["leaderToLeader"] == []
    assert data["warnings"] == []


def test_preview_endpoint_warns_for_inactive_period(authenticated_client, directory):
    period, _ = directory
    period.return_value = ACTIVE_PERIOD.model_copy(update={"status": "planning"})

    response = authenticated_client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "p1"})

    assert response.json()["warnings"] == ["Review period All Time is not currently active (planning)."]


def test_preview_endpoint_unknown_period(authenticated_client, directory):
    period, _ = directory
    period.return_value = None

    response = authenticated_client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "nope"})

    assert response.status_code == 404


def test_preview_endpoint_requires_admin(staff_client, directory):
    response = staff_client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "p1"})
    assert response.status_code == 403


def test_generate_endpoint_saves_each_assignment(authenticated_client, directory):
    _, save = directory
    response = authenticated_client.post(
        "/api/v1/assignments/generate",
        json={
            "reviewPeriodId": "p1",
            "options": {"includeMemberToLeader": False},
            "templateMapping": TEMPLATE_MAPPING,
            "dueDate": "2025-06-30",
        },
    )

    assert response.status_code == 201
    created = response.json()["created"]
    assert len(created) == 1
    assert created[0]["relationshipType"] == "leader-to-member"
    assert created[0]["templateId"] == "tpl-l2m"
    assert created[0]["assignmentType"] == "auto"
    assert created[0]["status"] == "pending"
    assert created[0]["dueDate"] == "2025-06-30"
    assert save.await_count == 1


def test_generate_endpoint_reports_save_failure(authenticated_client, directory):
    _, save = directory
    save.side_effect = DirectoryServiceError("not initialized")

    response = authenticated_client.post(
        "/api/v1/assignments/generate",
        json={"reviewPeriodId": "p1", "templateMapping": TEMPLATE_MAPPING},
    )

    assert response.status_code == 500
    assert "0 of 2 saved" in response.json()["detail"]


def test_generate_endpoint_requires_template_mapping(authenticated_client, directory):
    response = authenticated_client.post("/api/v1/assignments/generate", json={"reviewPeriodId": "p1"})
    assert response.status_code == 422


@pytest.mark.anyio
async def test_list_assignments_by_period(async_client, mock_user_staff):
    from appraisal_portal.core.dependencies import get_current_user
    from appraisal_portal.main import app

    app.dependency_overrides[get_current_user] = lambda: mock_user_staff
    with patch.object(directory_service, "get_assignments", AsyncMock(return_value=[])) as get_assignments:
        response = await async_client.get("/api/v1/assignments", params={"reviewPeriodId": "p1"})

    assert response.status_code == 200
    assert response.json() == []
    get_assignments.assert_awaited_once_with("p1")


def test_assignment_endpoints_unavailable_without_store(authenticated_client):
    with patch.object(directory_service, "get_review_period", AsyncMock()) as get_period:
        preview = authenticated_client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "p1"})
        generate = authenticated_client.post(
            "/api/v1/assignments/generate",
            json={"reviewPeriodId": "p1", "templateMapping": TEMPLATE_MAPPING},
        )

    assert preview.status_code == 503
    assert generate.status_code == 503
    get_period.assert_not_awaited()


def test_generate_endpoint_reports_transport_failure_mid_batch(authenticated_client, small_org):
    container = MagicMock()
    container.upsert_item = AsyncMock(side_effect=[None, ServiceRequestError("connection reset")])

    with (
        patch.object(directory_service, "initialized", True),
        patch.object(directory_service, "containers", {ASSIGNMENTS: container}),
        patch.object(directory_service, "get_review_period", AsyncMock(return_value=ACTIVE_PERIOD)),
        patch.object(directory_service, "get_employees", AsyncMock(return_value=small_org)),
    ):
        response = authenticated_client.post(
            "/api/v1/assignments/generate",
            json={"reviewPeriodId": "p1", "templateMapping": TEMPLATE_MAPPING},
        )

    assert response.status_code == 500
    assert "1 of 2 saved" in response.json()["detail"]
    assert container.upsert_item.await_count == 2
