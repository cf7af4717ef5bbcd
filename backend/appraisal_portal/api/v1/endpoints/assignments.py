from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from appraisal_portal.core.dependencies import get_current_user, require_admin
from appraisal_portal.models.assignment import (
    AppraisalAssignment,
    AutoAssignmentPreview,
    AutoAssignmentPreviewRequest,
    GenerateAssignmentsRequest,
    GenerateAssignmentsResponse,
)
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.models.employee import Employee
from appraisal_portal.models.review_period import ReviewPeriod
from appraisal_portal.services.auto_assignment import build_assignments_from_preview, preview_auto_assignments
from appraisal_portal.services.directory_service import DirectoryServiceError, directory_service
from appraisal_portal.services.period_utils import is_period_active

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])


async def _load_period_and_employees(review_period_id: str) -> tuple[ReviewPeriod, list[Employee]]:
    if not directory_service.initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory store is not configured",
        )

    try:
        period = await directory_service.get_review_period(review_period_id)
        employees = await directory_service.get_employees()
    except Exception as err:
        logger.exception("Failed to load directory for period %s", review_period_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve organization data",
        ) from err

    if period is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review period '{review_period_id}' not found",
        )
    return period, employees


def _period_warnings(period: ReviewPeriod) -> list[str]:
    if is_period_active(period):
        return []
    return [f"Review period {period.name} is not currently active ({period.status})."]


@router.post("/preview", response_model=AutoAssignmentPreview)
async def preview_assignments(
    request: AutoAssignmentPreviewRequest,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    period, employees = await _load_period_and_employees(request.review_period_id)
    preview = preview_auto_assignments(employees, period.id, request.options)
    preview.warnings.extend(_period_warnings(period))

    logger.info(
        "Auto-assignment preview: period=%s pairs=%d warnings=%d user=%s",
        period.id,
        preview.total,
        len(preview.warnings),
        user.name,
    )
    return preview


@router.post("/generate", response_model=GenerateAssignmentsResponse, status_code=status.HTTP_201_CREATED)
async def generate_assignments(
    request: GenerateAssignmentsRequest,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    period, employees = await _load_period_and_employees(request.review_period_id)
    preview = preview_auto_assignments(employees, period.id, request.options)
    assignments = build_assignments_from_preview(
        preview,
        request.template_mapping,
        period.id,
        period.name,
        request.due_date,
    )

    created: list[AppraisalAssignment] = []
    try:
        for assignment in assignments:
            created.append(await directory_service.save_assignment(assignment))
    except DirectoryServiceError as e:
        logger.error("Saved %d of %d assignments for period=%s: %s", len(created), len(assignments), period.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save assignments ({len(created)} of {len(assignments)} saved)",
        ) from e

    logger.info("Generated %d auto assignments for period=%s user=%s", len(created), period.id, user.name)
    return GenerateAssignmentsResponse(created=created, warnings=preview.warnings + _period_warnings(period))


@router.get("", response_model=list[AppraisalAssignment])
async def list_assignments(
    review_period_id: str | None = Query(None, alias="reviewPeriodId"),
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await directory_service.get_assignments(review_period_id)
    except Exception as err:
        logger.exception("Failed to list assignments")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve assignments",
        ) from err
