from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from appraisal_portal.models.employee import DirectorySnapshot
from appraisal_portal.services.directory_service import directory_service
from tests.conftest import make_employee


@pytest.fixture
def snapshot(small_org, teams, profiles):
    with patch.object(
        directory_service,
        "load_snapshot",
        AsyncMock(return_value=DirectorySnapshot(employees=small_org, teams=teams, profiles=profiles)),
    ) as mocked:
        yield mocked


def test_tree_endpoint_returns_single_root(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/tree")

    assert response.status_code == 200
    [root] = response.json()
    assert root["employee"]["id"] == "c1"
    assert root["isExpanded"] is True
    leader = root["children"][0]["children"][0]
    assert leader["employee"]["teamId"] == "t1"
    assert leader["team"]["name"] == "Engineering"
    assert leader["profile"]["headline"] == "Head of Engineering"


def test_tree_endpoint_honours_root_and_depth(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/tree", params={"rootEmployeeId": "e1", "maxDepth": 1})

    [root] = response.json()
    assert root["employee"]["id"] == "e1"
    assert root["children"][0]["employee"]["id"] == "l1"
    assert root["children"][0]["children"] == []
    assert root["children"][0]["isExpanded"] is False


def test_tree_endpoint_unknown_root_is_empty(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/tree", params={"rootEmployeeId": "ghost"})
    assert response.status_code == 200
    assert response.json() == []


def test_levels_endpoint(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/levels")

    assert response.status_code == 200
    levels = response.json()
    assert [[n["employee"]["id"] for n in row] for row in levels] == [["c1"], ["e1"], ["l1"], ["m1"]]


def test_levels_endpoint_filters_hierarchy(authenticated_client, snapshot):
    response = authenticated_client.get(
        "/api/v1/org-chart/levels",
        params=[("include", "leader"), ("include", "member")],
    )
    levels = response.json()
    assert [len(row) for row in levels] == [0, 0, 1, 1]


def test_department_endpoint(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/departments/t1")

    assert response.status_code == 200
    data = response.json()
    assert data["team"]["id"] == "t1"
    assert data["root"]["employee"]["id"] == "l1"
    assert data["leaderId"] == "l1"
    assert [[n["employee"]["id"] for n in row] for row in data["levels"]] == [["l1"], ["m1"]]


def test_department_endpoint_empty_team_is_404(authenticated_client, snapshot):
    response = authenticated_client.get("/api/v1/org-chart/departments/t2")
    assert response.status_code == 404
    assert "No department found" in response.json()["detail"]


def test_org_chart_load_failure_is_500(authenticated_client):
    with patch.object(directory_service, "load_snapshot", AsyncMock(side_effect=RuntimeError("down"))):
        response = authenticated_client.get("/api/v1/org-chart/levels")
    assert response.status_code == 500


def test_employees_endpoint_lists_directory(authenticated_client, small_org):
    with patch.object(directory_service, "get_employees", AsyncMock(return_value=small_org)):
        response = authenticated_client.get("/api/v1/employees")
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == ["c1", "e1", "l1", "m1"]


def test_reporting_chain_endpoint(staff_client):
    employees = [
        make_employee("e1", "executive"),
        make_employee("l1", "leader", reports_to="e1"),
        make_employee("m1", reports_to="l1"),
    ]
    with patch.object(directory_service, "get_employees", AsyncMock(return_value=employees)):
        chain = staff_client.get("/api/v1/employees/m1/reporting-chain")
        reports = staff_client.get("/api/v1/employees/l1/direct-reports")
        missing = staff_client.get("/api/v1/employees/ghost/reporting-chain")

    assert [e["id"] for e in chain.json()] == ["l1", "e1"]
    assert [e["id"] for e in reports.json()] == ["m1"]
    assert missing.status_code == 404


def test_employee_detail_endpoint(staff_client):
    employee = make_employee("m1", team_id="t1", reports_to="l1")
    with patch.object(directory_service, "get_employee", AsyncMock(side_effect=[employee, None])) as get_employee:
        found = staff_client.get("/api/v1/employees/m1")
        missing = staff_client.get("/api/v1/employees/ghost")

    assert found.status_code == 200
    assert found.json()["reportsTo"] == "l1"
    assert missing.status_code == 404
    get_employee.assert_any_await("ghost")
