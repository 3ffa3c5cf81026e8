"""Account management routes: list, get, update, delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.auth import get_current_user, require_permission
from app.api.v1.deps import get_account_service
from app.core.errors import ForbiddenError
from app.models import RoleName
from app.schemas.auth import AccountOut, CurrentUser
from app.schemas.common import ApiResponse
from app.schemas.users import UpdateAccountRequest
from app.services.accounts import AccountService
from app.services.permissions import USER_MANAGEMENT_MODULE

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_self_or_admin(current_user: CurrentUser, account_id: str) -> None:
    if current_user.id != account_id and current_user.role != RoleName.ADMIN.value:
        raise ForbiddenError()


@router.get("", response_model=ApiResponse[list[AccountOut]])
def list_accounts(
    _admin: Annotated[CurrentUser, Depends(require_permission(USER_MANAGEMENT_MODULE, "read"))],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[list[AccountOut]]:
    """List all accounts (Admin with User Management read)."""
    items = [AccountOut.model_validate(a) for a in accounts.list_accounts()]
    return ApiResponse[list[AccountOut]](success=True, message="OK", data=items)


@router.get("/{account_id}", response_model=ApiResponse[AccountOut])
def get_account(
    account_id: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[AccountOut]:
    """Return one account (the caller's own, or any account for Admin)."""
    _require_self_or_admin(current_user, account_id)
    view = accounts.get_account(account_id)
    return ApiResponse[AccountOut](success=True, message="OK", data=AccountOut.model_validate(view))


@router.put("/{account_id}", response_model=ApiResponse[None])
def update_account(
    account_id: str,
    body: UpdateAccountRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[None]:
    """Update name and/or email. A new email must be verified again."""
    _require_self_or_admin(current_user, account_id)
    accounts.update_profile(account_id, new_name=body.name, new_email=body.email)
    return ApiResponse[None](success=True, message="User updated successfully.")


@router.delete("/{account_id}", response_model=ApiResponse[None])
def delete_account(
    account_id: str,
    admin: Annotated[CurrentUser, Depends(require_permission(USER_MANAGEMENT_MODULE, "delete"))],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> ApiResponse[None]:
    """Hard-delete an account (Admin with User Management delete)."""
    accounts.delete_account(account_id)
    logger.info("Account deleted by admin", extra={"admin_id": admin.id, "account_id": account_id})
    return ApiResponse[None](success=True, message="User deleted successfully.")
