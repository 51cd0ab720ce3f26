"""Admin authentication schemas."""

from pydantic import Field

from .base import StandardizedModel, StrictModel


class LoginRequest(StrictModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class AdminResponse(StandardizedModel):
    id: int
    email: str


class TokenResponse(StandardizedModel):
    access_token: str
    token_type: str = "bearer"
    admin: AdminResponse
