# advisor_booking/api/dependencies/auth.py
"""
Authentication dependencies for admin-only routes.
"""

import asyncio
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status

from ...auth import oauth2_scheme_optional
from ...core.exceptions import UnauthorizedException
from ...models.admin import Admin
from ...services.auth_service import AuthService
from .services import get_auth_service

logger = logging.getLogger(__name__)


async def get_current_admin(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    auth_service: AuthService = Depends(get_auth_service),
) -> Admin:
    """
    Resolve the bearer token to an existing admin.

    Raises:
        HTTPException: 401 when the token is missing, invalid, expired, or
            the admin was removed
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Not authenticated", "code": "NOT_AUTHENTICATED"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await asyncio.to_thread(auth_service.get_admin_from_token, token)
    except UnauthorizedException as exc:
        http_exc = exc.to_http_exception()
        http_exc.headers = {"WWW-Authenticate": "Bearer"}
        raise http_exc
