from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from appraisal_portal.core.config import settings
from appraisal_portal.core.dependencies import get_current_user
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.models.employee import DirectorySnapshot
from appraisal_portal.models.org_chart import ALL_HIERARCHIES, DepartmentChart, OrgChartConfig, OrgChartNode
from appraisal_portal.services.directory_service import directory_service
from appraisal_portal.services.org_chart import (
    build_org_chart_levels,
    build_org_chart_tree,
    get_department_leader_id,
    get_department_subtree,
    tree_to_levels,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/org-chart", tags=["org-chart"])


async def _load_snapshot() -> DirectorySnapshot:
    try:
        return await directory_service.load_snapshot()
    except Exception as err:
        logger.exception("Failed to load directory snapshot")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve organization data",
        ) from err


@router.get("/tree", response_model=list[OrgChartNode])
async def org_chart_tree(
    root_employee_id: str | None = Query(None, alias="rootEmployeeId"),
    max_depth: int | None = Query(None, alias="maxDepth", ge=0),
    include: list[str] | None = Query(None),
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    snapshot = await _load_snapshot()
    config = OrgChartConfig(
        include_hierarchy=include or list(ALL_HIERARCHIES),
        root_employee_id=root_employee_id,
        max_depth=settings.ORG_CHART_MAX_DEPTH if max_depth is None else max_depth,
    )
    return build_org_chart_tree(snapshot.employees, snapshot.profiles, snapshot.teams, config)


@router.get("/levels", response_model=list[list[OrgChartNode]])
async def org_chart_levels(
    group_by_department: bool = Query(False, alias="groupByDepartment"),
    sort_alphabetically: bool = Query(True, alias="sortAlphabetically"),
    include: list[str] | None = Query(None),
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    snapshot = await _load_snapshot()
    config = OrgChartConfig(
        include_hierarchy=include or list(ALL_HIERARCHIES),
        group_by_department=group_by_department,
        sort_alphabetically=sort_alphabetically,
    )
    return build_org_chart_levels(snapshot.employees, snapshot.profiles, snapshot.teams, config)


@router.get("/departments/{team_id}", response_model=DepartmentChart)
async def department_chart(
    team_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    snapshot = await _load_snapshot()
    root = get_department_subtree(team_id, snapshot.employees, snapshot.teams, snapshot.profiles)
    if root is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No department found for team '{team_id}'",
        )

    team = next(t for t in snapshot.teams if t.id == team_id)
    return DepartmentChart(
        team=team,
        root=root,
        levels=tree_to_levels(root),
        leader_id=get_department_leader_id(team_id, snapshot.employees),
    )
