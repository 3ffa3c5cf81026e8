"""Request-scoped service wiring: unit of work, notifier and the two managers."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.repositories.sql import SqlUnitOfWork
from app.services.accounts import AccountService
from app.services.mailer import VerificationNotifier, build_notifier
from app.services.permissions import PermissionService


def get_uow(db: Annotated[Session, Depends(get_db)]) -> SqlUnitOfWork:
    return SqlUnitOfWork(db)


def get_notifier(
    settings: Annotated[Settings, Depends(get_settings)],
) -> VerificationNotifier:
    return build_notifier(settings)


def get_account_service(
    uow: Annotated[SqlUnitOfWork, Depends(get_uow)],
    settings: Annotated[Settings, Depends(get_settings)],
    notifier: Annotated[VerificationNotifier, Depends(get_notifier)],
) -> AccountService:
    return AccountService(uow, settings, notifier)


def get_permission_service(
    uow: Annotated[SqlUnitOfWork, Depends(get_uow)],
) -> PermissionService:
    return PermissionService(uow)
