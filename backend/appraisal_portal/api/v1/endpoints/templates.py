from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from appraisal_portal.core.dependencies import get_current_user
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.models.template import Template
from appraisal_portal.services.directory_service import directory_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=list[Template])
async def list_templates(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await directory_service.get_templates()
    except Exception as err:
        logger.exception("Failed to list templates")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve templates",
        ) from err
