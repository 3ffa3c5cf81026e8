"""Repository interfaces: the only surface the services use to reach persistence."""

from typing import Protocol

from app.models import Account, ActivityRecord, Module, Role, RolePermission


class PersistenceError(Exception):
    """Base for errors raised by repository implementations."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateKeyError(PersistenceError):
    """A write violated a uniqueness constraint (email, role x module)."""


class StaleEntityError(PersistenceError):
    """A write targeted a row that changed or vanished since it was read."""


class AccountRepository(Protocol):
    def get(self, account_id: str) -> Account | None: ...

    def get_by_email(self, email: str) -> Account | None: ...

    def list_all(self) -> list[Account]: ...

    def add(self, account: Account) -> None: ...

    def remove(self, account: Account) -> None: ...


class RoleRepository(Protocol):
    def get(self, name: str) -> Role | None: ...

    def list_all(self) -> list[Role]: ...

    def add(self, role: Role) -> None: ...


class ModuleRepository(Protocol):
    def get(self, module_id: int) -> Module | None: ...

    def get_by_name(self, name: str) -> Module | None: ...

    def list_all(self) -> list[Module]: ...

    def add(self, module: Module) -> None: ...


class PermissionRepository(Protocol):
    def get(self, role: str, module_id: int) -> RolePermission | None: ...

    def list_all(self) -> list[RolePermission]: ...

    def add(self, permission: RolePermission) -> None: ...


class ActivityRepository(Protocol):
    def add(self, record: ActivityRecord) -> None: ...

    def list_for_account(self, account_id: str) -> list[ActivityRecord]: ...


class UnitOfWork(Protocol):
    """
    Groups the repositories over one transaction.

    add() makes a pending row visible to subsequent reads in the same unit;
    commit() makes every pending change durable at once; rollback() discards them.
    """

    accounts: AccountRepository
    roles: RoleRepository
    modules: ModuleRepository
    permissions: PermissionRepository
    activities: ActivityRepository

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
