"""Permission matrix administration (Admin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.auth import require_admin
from app.api.v1.deps import get_permission_service
from app.schemas.auth import CurrentUser
from app.schemas.common import ApiResponse
from app.schemas.permissions import RolePermissionItem
from app.services.permissions import PermissionFlags, PermissionService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[RolePermissionItem]])
def list_permissions(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    permissions: Annotated[PermissionService, Depends(get_permission_service)],
) -> ApiResponse[list[RolePermissionItem]]:
    """Flattened matrix: one row per (role, module) cell."""
    items = [RolePermissionItem.model_validate(e) for e in permissions.list_all_permissions()]
    return ApiResponse[list[RolePermissionItem]](success=True, message="OK", data=items)


@router.put("", response_model=ApiResponse[RolePermissionItem])
def set_permission(
    body: RolePermissionItem,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    permissions: Annotated[PermissionService, Depends(get_permission_service)],
) -> ApiResponse[RolePermissionItem]:
    """Create or fully replace the four grants of one (role, module) cell."""
    entry = permissions.set_permission(
        body.role,
        body.module,
        PermissionFlags(
            can_create=body.can_create,
            can_read=body.can_read,
            can_update=body.can_update,
            can_delete=body.can_delete,
        ),
    )
    return ApiResponse[RolePermissionItem](
        success=True,
        message="Role permission updated successfully.",
        data=RolePermissionItem.model_validate(entry),
    )
