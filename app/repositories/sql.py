"""SQLAlchemy implementation of the repositories, sharing one Session per unit of work."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models import Account, ActivityRecord, Module, Role, RolePermission
from app.repositories.base import DuplicateKeyError, StaleEntityError

logger = logging.getLogger(__name__)


def _flush(session: Session) -> None:
    """Flush pending rows so constraint violations surface at the call site."""
    try:
        session.flush()
    except IntegrityError as e:
        session.rollback()
        raise DuplicateKeyError(str(e.orig)) from e


class SqlAccountRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, account_id: str) -> Account | None:
        return self._session.get(Account, account_id)

    def get_by_email(self, email: str) -> Account | None:
        return (
            self._session.query(Account)
            .filter(Account.email == email.strip().lower())
            .first()
        )

    def list_all(self) -> list[Account]:
        return self._session.query(Account).order_by(Account.created_at, Account.email).all()

    def add(self, account: Account) -> None:
        self._session.add(account)
        _flush(self._session)

    def remove(self, account: Account) -> None:
        self._session.delete(account)


class SqlRoleRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, name: str) -> Role | None:
        return self._session.get(Role, name)

    def list_all(self) -> list[Role]:
        return self._session.query(Role).order_by(Role.name).all()

    def add(self, role: Role) -> None:
        self._session.add(role)
        _flush(self._session)


class SqlModuleRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, module_id: int) -> Module | None:
        return self._session.get(Module, module_id)

    def get_by_name(self, name: str) -> Module | None:
        return self._session.query(Module).filter(Module.name == name).first()

    def list_all(self) -> list[Module]:
        return self._session.query(Module).order_by(Module.id).all()

    def add(self, module: Module) -> None:
        self._session.add(module)
        _flush(self._session)


class SqlPermissionRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, role: str, module_id: int) -> RolePermission | None:
        return (
            self._session.query(RolePermission)
            .filter(RolePermission.role == role, RolePermission.module_id == module_id)
            .first()
        )

    def list_all(self) -> list[RolePermission]:
        return (
            self._session.query(RolePermission)
            .order_by(RolePermission.role, RolePermission.module_id)
            .all()
        )

    def add(self, permission: RolePermission) -> None:
        self._session.add(permission)
        _flush(self._session)


class SqlActivityRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, record: ActivityRecord) -> None:
        self._session.add(record)

    def list_for_account(self, account_id: str) -> list[ActivityRecord]:
        return (
            self._session.query(ActivityRecord)
            .filter(ActivityRecord.account_id == account_id)
            .order_by(ActivityRecord.occurred_at, ActivityRecord.id)
            .all()
        )


class SqlUnitOfWork:
    """Unit of work over a request-scoped Session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.accounts = SqlAccountRepository(session)
        self.roles = SqlRoleRepository(session)
        self.modules = SqlModuleRepository(session)
        self.permissions = SqlPermissionRepository(session)
        self.activities = SqlActivityRepository(session)

    def commit(self) -> None:
        try:
            self.session.commit()
        except StaleDataError as e:
            self.session.rollback()
            logger.warning("Concurrent modification detected on commit: %s", e)
            raise StaleEntityError(str(e)) from e
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateKeyError(str(e.orig)) from e

    def rollback(self) -> None:
        self.session.rollback()
