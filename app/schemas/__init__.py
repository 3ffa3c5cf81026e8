"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccountOut,
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    VerifyEmailRequest,
)
from app.schemas.common import ApiResponse
from app.schemas.health import HealthResponse
from app.schemas.permissions import RolePermissionItem
from app.schemas.users import UpdateAccountRequest

__all__ = [
    "AccountOut",
    "ApiResponse",
    "AuthPayload",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RolePermissionItem",
    "UpdateAccountRequest",
    "VerifyEmailRequest",
]
