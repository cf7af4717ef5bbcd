from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from appraisal_portal.core.dependencies import get_current_user, require_admin
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.models.review_period import PeriodType, ReviewPeriodDraft, ReviewPeriodSummary
from appraisal_portal.services.directory_service import directory_service
from appraisal_portal.services.period_utils import Cadence, period_draft, summarize_period

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/review-periods", tags=["review-periods"])


@router.get("/draft", response_model=ReviewPeriodDraft)
async def draft_review_period(
    period_type: PeriodType | None = Query(None, alias="type"),
    year: int | None = Query(None, ge=1970),
    cadence: Cadence = Query("quarter"),
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    return period_draft(period_type, year, cadence)


@router.get("/{period_id}", response_model=ReviewPeriodSummary)
async def get_review_period(
    period_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    if not directory_service.initialized:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory store is not configured",
        )

    try:
        period = await directory_service.get_review_period(period_id)
    except Exception as err:
        logger.exception("Failed to load review period %s", period_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve review period",
        ) from err

    if period is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review period '{period_id}' not found",
        )
    return summarize_period(period)
