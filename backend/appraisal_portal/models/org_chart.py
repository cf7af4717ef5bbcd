"""View models for org chart rendering. Built per request, never persisted."""

from __future__ import annotations

from pydantic import Field

from appraisal_portal.models.employee import Employee, EmployeeProfile, HierarchyTag, PortalModel, Team

ALL_HIERARCHIES: list[HierarchyTag] = ["chairman", "executive", "leader", "department-leader", "member", "hr"]


class OrgChartNode(PortalModel):
    employee: Employee
    profile: EmployeeProfile | None = None
    team: Team | None = None
    children: list[OrgChartNode] = []
    is_expanded: bool | None = None


class OrgChartConfig(PortalModel):
    include_hierarchy: list[str] = Field(default_factory=lambda: list(ALL_HIERARCHIES))
    root_employee_id: str | None = None
    max_depth: int = Field(default=20, ge=0)
    group_by_department: bool = False
    sort_alphabetically: bool = True


class DepartmentChart(PortalModel):
    """A single department's tree plus its per-depth rows."""

    team: Team
    root: OrgChartNode
    levels: list[list[OrgChartNode]]
    leader_id: str | None = None
