"""Registration, login and email verification routes, plus the auth dependencies
(get_current_user, require_admin, require_permission)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.v1.deps import get_account_service, get_permission_service, get_uow
from app.core.config import Settings, get_settings
from app.core.errors import ForbiddenError, UnauthorizedError
from app.core.security import decode_access_token
from app.models import RoleName
from app.repositories.sql import SqlUnitOfWork
from app.schemas.auth import (
    AccountOut,
    AuthPayload,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    VerifyEmailRequest,
)
from app.schemas.common import ApiResponse
from app.services.accounts import AccountService, AuthResult
from app.services.permissions import PermissionService

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _auth_response(result: AuthResult) -> ApiResponse[AuthPayload]:
    return ApiResponse[AuthPayload](
        success=True,
        message=result.message,
        data=AuthPayload(
            user=AccountOut.model_validate(result.account),
            token=result.token,
            token_type="bearer" if result.token else None,
        ),
    )


@router.post("/register", response_model=ApiResponse[AuthPayload])
def register(
    body: RegisterRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[AuthPayload]:
    """Create an account and send a verification token by email. No session token is issued."""
    result = accounts.register(body.email, body.password, body.name, body.role)
    return _auth_response(result)


@router.post("/login", response_model=ApiResponse[AuthPayload])
def login(
    body: LoginRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[AuthPayload]:
    """
    Authenticate with email and password; returns a JWT session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return _auth_response(accounts.login(body.email, body.password))


@router.post("/verify-email", response_model=ApiResponse[AuthPayload])
def verify_email(
    body: VerifyEmailRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[AuthPayload]:
    """Confirm ownership of the email address; doubles as the first login."""
    return _auth_response(accounts.verify_email(body.email, body.token))


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    uow: Annotated[SqlUnitOfWork, Depends(get_uow)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT and return the caller. Raises 401 if missing or invalid."""
    if credentials is None:
        raise UnauthorizedError("Not authenticated.")
    claims = decode_access_token(credentials.credentials, settings)
    if claims is None:
        raise UnauthorizedError("Invalid or expired token.")
    account = uow.accounts.get(claims.account_id)
    if account is None:
        raise UnauthorizedError("Invalid or expired token.")
    return CurrentUser(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role or RoleName.USER.value,
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated caller with role Admin. Raises 403 otherwise."""
    if current_user.role != RoleName.ADMIN.value:
        raise ForbiddenError()
    return current_user


def require_permission(module: str, action: str) -> Callable[..., CurrentUser]:
    """Dependency factory: require Admin plus the (module, action) grant in the matrix."""

    def _check(
        current_user: Annotated[CurrentUser, Depends(require_admin)],
        permissions: Annotated[PermissionService, Depends(get_permission_service)],
    ) -> CurrentUser:
        if not permissions.has_permission(current_user.id, module, action):
            raise ForbiddenError()
        return current_user

    return _check
