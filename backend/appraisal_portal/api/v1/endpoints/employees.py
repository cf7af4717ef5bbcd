from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from appraisal_portal.core.dependencies import get_current_user
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.models.employee import Employee
from appraisal_portal.services.directory_service import directory_service
from appraisal_portal.services.reporting_chain import get_direct_reports, get_reporting_chain

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


async def _load_employees() -> list[Employee]:
    try:
        return await directory_service.get_employees()
    except Exception as err:
        logger.exception("Failed to load employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err


def _require_known(employee_id: str, employees: list[Employee]) -> None:
    if not any(e.id == employee_id for e in employees):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee '{employee_id}' not found",
        )


@router.get("", response_model=list[Employee])
async def list_employees(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    return await _load_employees()


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employee = await directory_service.get_employee(employee_id)
    except Exception as err:
        logger.exception("Failed to load employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve employees",
        ) from err

    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee '{employee_id}' not found",
        )
    return employee


@router.get("/{employee_id}/direct-reports", response_model=list[Employee])
async def list_direct_reports(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    employees = await _load_employees()
    _require_known(employee_id, employees)
    return get_direct_reports(employee_id, employees)


@router.get("/{employee_id}/reporting-chain", response_model=list[Employee])
async def reporting_chain(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    employees = await _load_employees()
    _require_known(employee_id, employees)
    return get_reporting_chain(employee_id, employees)
