"""Azure AD bearer tokens → portal users."""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any

from fastapi import HTTPException, status
from jose import jwk, jwt
from jose.constants import Algorithms
from jose.exceptions import ExpiredSignatureError, JWSSignatureError, JWTClaimsError, JWTError

from appraisal_portal.models.auth import UserInfo

logger = logging.getLogger(__name__)

_JWKS_TTL_SECONDS = 24 * 60 * 60
_EMPLOYEE_ID_CLAIMS = ("employee_id", "extension_employeeId", "employeeid")

# tenant id -> (fetched at, key set)
_jwks_cache: dict[str, tuple[float, dict[str, Any]]] = {}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_jwks(tenant_id: str) -> dict[str, Any]:
    cached = _jwks_cache.get(tenant_id)
    if cached and time.time() - cached[0] < _JWKS_TTL_SECONDS:
        return cached[1]

    jwks_uri = f"https://login.microsoftonline.com/{tenant_id}/discovery/v2.0/keys"
    logger.info("Fetching JWKS from %s", jwks_uri)
    try:
        with urllib.request.urlopen(urllib.request.Request(jwks_uri), timeout=15) as resp:  # noqa: S310
            jwks = json.loads(resp.read().decode())
    except urllib.error.URLError as e:
        if cached:
            logger.warning("JWKS fetch failed (%s); reusing stale keys for tenant %s", e, tenant_id)
            return cached[1]
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Identity provider unavailable",
        ) from e

    _jwks_cache[tenant_id] = (time.time(), jwks)
    return jwks


def _signing_key(token: str, tenant_id: str) -> dict[str, Any]:
    try:
        kid = jwt.get_unverified_header(token).get("kid")
    except JWTError as e:
        raise _unauthorized("Malformed token") from e

    if not kid:
        raise _unauthorized("Token has no key id")

    for key in get_jwks(tenant_id).get("keys", []):
        if key.get("kid") == kid:
            return key
    raise _unauthorized("Unknown signing key")


def validate_token(token: str, tenant_id: str, client_id: str) -> dict[str, Any]:
    if not tenant_id or not client_id:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Missing Azure AD configuration",
        )

    key = _signing_key(token, tenant_id)
    algorithm = key.get("alg", Algorithms.RS256)
    public_key = jwk.construct(key, algorithm=algorithm)

    issuers = (
        f"https://login.microsoftonline.com/{tenant_id}/v2.0",
        f"https://sts.windows.net/{tenant_id}/",
    )
    audiences = (client_id, f"api://{client_id}")

    for issuer in issuers:
        for audience in audiences:
            try:
                return jwt.decode(
                    token,
                    public_key,
                    algorithms=[algorithm],
                    audience=audience,
                    issuer=issuer,
                    options={"require_exp": True, "require_iss": True, "require_aud": True},
                )
            except ExpiredSignatureError as e:
                raise _unauthorized("Token is expired") from e
            except JWSSignatureError as e:
                raise _unauthorized("Invalid token signature") from e
            except (JWTClaimsError, JWTError):
                continue

    raise _unauthorized("Invalid authentication credentials")


def extract_roles_from_token(payload: dict[str, Any]) -> list[str]:
    roles = payload.get("roles", [])
    if not isinstance(roles, list):
        return []
    return [str(r) for r in roles if isinstance(r, str | int)]


def user_from_payload(payload: dict[str, Any]) -> UserInfo:
    employee_id = next((payload[c] for c in _EMPLOYEE_ID_CLAIMS if payload.get(c)), None)
    return UserInfo(
        id=payload.get("oid"),
        name=payload.get("name"),
        email=payload.get("preferred_username"),
        roles=extract_roles_from_token(payload),
        employee_id=str(employee_id) if employee_id is not None else None,
    )
