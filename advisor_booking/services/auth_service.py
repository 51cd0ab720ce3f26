# advisor_booking/services/auth_service.py
"""
Auth Service

Admin login, token resolution and admin provisioning.
"""

import logging
from typing import Any, Dict

import jwt
from sqlalchemy.orm import Session

from ..auth import (
    DUMMY_HASH_FOR_TIMING_ATTACK,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from ..core.config import settings
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    UnauthorizedException,
    ValidationException,
)
from ..core.validators import normalize_email
from ..models.admin import Admin
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.admin_repository = RepositoryFactory.create_admin_repository(db)

    @BaseService.measure_operation("login")
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Exchange admin credentials for a bearer token.

        Raises:
            UnauthorizedException: unknown email or wrong password
        """
        try:
            admin = self.admin_repository.get_by_email(email or "")
        finally:
            self.end_read()
        if admin is None:
            verify_password(password or "", DUMMY_HASH_FOR_TIMING_ATTACK)
            logger.warning("Login failed for unknown admin %s", email)
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")
        if not verify_password(password or "", admin.password_hash):
            logger.warning("Login failed for admin %s: wrong password", admin.email)
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")

        token = create_access_token({"sub": admin.email, "admin_id": admin.id})
        self.log_operation("admin_login", admin_id=admin.id)
        return {
            "access_token": token,
            "token_type": "bearer",
            "admin": {"id": admin.id, "email": admin.email},
        }

    def get_admin_from_token(self, token: str) -> Admin:
        """
        Resolve a bearer token to a still-existing admin.

        Raises:
            UnauthorizedException: invalid/expired token or deleted admin
        """
        try:
            payload = decode_access_token(token)
        except jwt.ExpiredSignatureError as exc:
            raise UnauthorizedException("Token expired", code="TOKEN_EXPIRED") from exc
        except jwt.PyJWTError as exc:
            logger.warning("JWT validation error: %s", exc)
            raise UnauthorizedException("Invalid token", code="INVALID_TOKEN") from exc

        try:
            admin = self.admin_repository.get_by_email(str(payload.get("sub", "")))
        finally:
            self.end_read()
        if admin is None:
            raise UnauthorizedException("Admin no longer exists", code="INVALID_TOKEN")
        return admin

    @BaseService.measure_operation("create_admin")
    def create_admin(self, email: str, password: str) -> Admin:
        """
        Provision an admin account. Refused in production.

        Raises:
            ForbiddenException: running in production
            ValidationException: bad email or too-short password
            ConflictException: email already registered
        """
        if settings.is_production:
            raise ForbiddenException("Creating admins is disabled in production")
        normalized = normalize_email(email, field="email")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                details={"field": "password"},
            )

        with self.transaction():
            if self.admin_repository.get_by_email(normalized) is not None:
                raise ConflictException("Admin already exists", code="ADMIN_EXISTS")
            admin = self.admin_repository.create(
                email=normalized, password_hash=get_password_hash(password)
            )
        self.log_operation("admin_created", admin_id=admin.id)
        return admin
