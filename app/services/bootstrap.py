"""Idempotent bootstrap seeding: module catalog, roles, default admin and default permission matrix."""

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.core.security import hash_password
from app.models import Account, Module, Role, RoleName, RolePermission
from app.repositories.base import UnitOfWork
from app.services.accounts import normalize_email
from app.services.permissions import USER_MANAGEMENT_MODULE, PermissionFlags

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MODULES = (USER_MANAGEMENT_MODULE, "Asset Management", "Reports")

# Matrix cell every (role, module) pair starts with.
DEFAULT_ROLE_FLAGS: dict[RoleName, PermissionFlags] = {
    RoleName.ADMIN: PermissionFlags(True, True, True, True),
    RoleName.MANAGER: PermissionFlags(True, True, True, False),
    RoleName.USER: PermissionFlags(False, True, False, False),
}


@dataclass
class SeedReport:
    modules_created: int = 0
    roles_created: int = 0
    admin_created: bool = False
    permissions_created: int = 0


def seed_defaults(uow: UnitOfWork, settings: "Settings") -> SeedReport:
    """
    Ensure modules, roles, the default admin and default matrix cells exist.

    Only missing rows are inserted; existing cells keep whatever an administrator set.
    Safe to run on every start.
    """
    report = SeedReport()

    for name in DEFAULT_MODULES:
        if uow.modules.get_by_name(name) is None:
            uow.modules.add(Module(name=name))
            report.modules_created += 1

    for role in RoleName:
        if uow.roles.get(role.value) is None:
            uow.roles.add(Role(name=role.value))
            report.roles_created += 1

    admin_email = normalize_email(settings.DEFAULT_ADMIN_EMAIL)
    if uow.accounts.get_by_email(admin_email) is None:
        uow.accounts.add(
            Account(
                id=str(uuid.uuid4()),
                email=admin_email,
                name=settings.DEFAULT_ADMIN_NAME,
                password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD.get_secret_value()),
                email_verified=True,
                verification_token=None,
                verification_token_expires_at=None,
                role=RoleName.ADMIN.value,
            )
        )
        report.admin_created = True

    for module in uow.modules.list_all():
        for role, flags in DEFAULT_ROLE_FLAGS.items():
            if uow.permissions.get(role.value, module.id) is not None:
                continue
            uow.permissions.add(
                RolePermission(
                    role=role.value,
                    module_id=module.id,
                    can_create=flags.can_create,
                    can_read=flags.can_read,
                    can_update=flags.can_update,
                    can_delete=flags.can_delete,
                )
            )
            report.permissions_created += 1

    uow.commit()
    logger.info(
        "Seeding completed: modules_created=%s roles_created=%s admin_created=%s permissions_created=%s",
        report.modules_created,
        report.roles_created,
        report.admin_created,
        report.permissions_created,
    )
    return report
