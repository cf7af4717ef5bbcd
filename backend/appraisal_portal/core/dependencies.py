from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, status

from appraisal_portal.core.auth import user_from_payload, validate_token
from appraisal_portal.core.config import settings
from appraisal_portal.models.auth import UserInfo

logger = logging.getLogger(__name__)


async def get_current_user(authorization: str | None = Header(None)) -> UserInfo:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1]

    try:
        payload = validate_token(token, settings.AZURE_AD_TENANT_ID, settings.AZURE_AD_CLIENT_ID)
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Token validation error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return user_from_payload(payload)


def require_role(*roles: str):
    async def _check_role(user: UserInfo = Depends(get_current_user)) -> UserInfo:
        if not any(r in user.roles for r in roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {', '.join(roles)}",
            )
        return user

    return _check_role


async def require_admin(user: UserInfo = Depends(get_current_user)) -> UserInfo:
    return await require_role(settings.ADMIN_ROLE)(user=user)
