# advisor_booking/routes/v1/auth.py
"""
Admin authentication routes

Endpoints:
    POST /login - Exchange credentials for a bearer token
    GET /me - The admin behind the current token
"""

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...api.dependencies import get_auth_service, get_current_admin
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...models.admin import Admin
from ...schemas.auth import AdminResponse, LoginRequest, TokenResponse
from ...schemas.base import ApiResponse, ok
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    try:
        token = await asyncio.to_thread(auth_service.login, payload.email, payload.password)
    except DomainException as e:
        handle_domain_exception(e)
    return ok(token, message="Login successful")


@router.get("/me", response_model=ApiResponse[AdminResponse])
async def read_current_admin(admin: Admin = Depends(get_current_admin)) -> Dict[str, Any]:
    return ok({"id": admin.id, "email": admin.email})
