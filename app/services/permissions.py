"""Role x module permission matrix: evaluation (default-deny) and administration."""

import logging
from dataclasses import dataclass

from app.core.errors import UnknownModuleError, UnknownRoleError
from app.models import RoleName, RolePermission
from app.repositories.base import DuplicateKeyError, UnitOfWork

logger = logging.getLogger(__name__)

# Action name -> RolePermission column.
ACTION_FLAGS = {
    "create": "can_create",
    "read": "can_read",
    "update": "can_update",
    "delete": "can_delete",
}

# Module names referenced by the API surface.
USER_MANAGEMENT_MODULE = "User Management"


@dataclass(frozen=True)
class PermissionFlags:
    can_create: bool = False
    can_read: bool = False
    can_update: bool = False
    can_delete: bool = False


@dataclass(frozen=True)
class PermissionEntry:
    """One flattened matrix cell for display."""

    role: str
    module: str
    can_create: bool
    can_read: bool
    can_update: bool
    can_delete: bool


def _flag_for_action(cell: RolePermission, action: str) -> bool:
    attr = ACTION_FLAGS.get(action.strip().lower()) if isinstance(action, str) else None
    if attr is None:
        return False
    return bool(getattr(cell, attr))


class PermissionService:
    """Evaluates and administers the permission matrix through a unit of work."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def has_permission(self, account_id: str, module_name: str, action: str) -> bool:
        """
        Closed-world check: False when the account, its role, the module or the
        matrix cell is missing, or when the action is not create/read/update/delete.
        """
        account = self._uow.accounts.get(account_id)
        if account is None or not account.role:
            return False
        module = self._uow.modules.get_by_name(module_name)
        if module is None:
            return False
        cell = self._uow.permissions.get(account.role, module.id)
        if cell is None:
            return False
        return _flag_for_action(cell, action)

    def list_all_permissions(self) -> list[PermissionEntry]:
        modules = {m.id: m.name for m in self._uow.modules.list_all()}
        entries = [
            PermissionEntry(
                role=cell.role,
                module=modules.get(cell.module_id, ""),
                can_create=bool(cell.can_create),
                can_read=bool(cell.can_read),
                can_update=bool(cell.can_update),
                can_delete=bool(cell.can_delete),
            )
            for cell in self._uow.permissions.list_all()
        ]
        return sorted(entries, key=lambda e: (e.role, e.module))

    def set_permission(
        self, role_name: str, module_name: str, flags: PermissionFlags
    ) -> PermissionEntry:
        """Create the (role, module) cell or overwrite all four flags (full replace)."""
        role = RoleName.parse(role_name)
        if role is None or self._uow.roles.get(role.value) is None:
            raise UnknownRoleError(f"Unknown role: {role_name}")
        module = self._uow.modules.get_by_name(module_name)
        if module is None:
            raise UnknownModuleError(f"Unknown module: {module_name}")

        cell = self._uow.permissions.get(role.value, module.id)
        if cell is None:
            cell = RolePermission(role=role.value, module_id=module.id)
            try:
                self._uow.permissions.add(cell)
            except DuplicateKeyError:
                # A concurrent writer created the cell first; overwrite theirs.
                cell = self._uow.permissions.get(role.value, module.id)
                if cell is None:
                    raise
        _apply_flags(cell, flags)
        self._uow.commit()

        logger.info(
            "Permission updated",
            extra={
                "role": role.value,
                "module": module.name,
                "can_create": flags.can_create,
                "can_read": flags.can_read,
                "can_update": flags.can_update,
                "can_delete": flags.can_delete,
            },
        )
        return PermissionEntry(
            role=role.value,
            module=module.name,
            can_create=flags.can_create,
            can_read=flags.can_read,
            can_update=flags.can_update,
            can_delete=flags.can_delete,
        )


def _apply_flags(cell: RolePermission, flags: PermissionFlags) -> None:
    cell.can_create = flags.can_create
    cell.can_read = flags.can_read
    cell.can_update = flags.can_update
    cell.can_delete = flags.can_delete
