"""Request/response schemas for the permission matrix endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RolePermissionItem(BaseModel):
    """One (role, module) cell with its four grants."""

    model_config = ConfigDict(from_attributes=True)

    role: str = Field(..., min_length=1, max_length=32, description="Role name")
    module: str = Field(..., min_length=1, max_length=255, description="Module name")
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False
