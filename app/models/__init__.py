"""SQLAlchemy ORM models."""

from app.models.account import Account
from app.models.activity import ActivityRecord
from app.models.base import Base
from app.models.module import Module
from app.models.role import Role, RoleName
from app.models.role_permission import RolePermission

__all__ = [
    "Account",
    "ActivityRecord",
    "Base",
    "Module",
    "Role",
    "RoleName",
    "RolePermission",
]
