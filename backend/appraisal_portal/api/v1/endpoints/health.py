from __future__ import annotations

from fastapi import APIRouter, Depends

from appraisal_portal.core.config import settings
from appraisal_portal.core.dependencies import get_current_user
from appraisal_portal.models.auth import UserInfo
from appraisal_portal.services.directory_service import directory_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if directory_service.initialized:
            ok = await directory_service.check_connection()
            services["cosmos_db"] = "ok" if ok else "error"
        else:
            services["cosmos_db"] = "not_configured"
    except Exception:
        services["cosmos_db"] = "error"

    services["azure_ad"] = "ok" if settings.AZURE_AD_TENANT_ID and settings.AZURE_AD_CLIENT_ID else "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/protected")
async def health_protected(user: UserInfo = Depends(get_current_user)):
    return {"status": "ok", "user": user.model_dump()}


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
