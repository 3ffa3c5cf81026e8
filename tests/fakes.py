"""In-memory unit of work, notifier and clock used by the service tests."""

from datetime import UTC, datetime, timedelta

from pydantic import SecretStr

from app.core.config import Settings
from app.models import Account, ActivityRecord, Module, Role, RolePermission
from app.repositories.base import DuplicateKeyError
from app.services.mailer import MailDeliveryError

JWT_TEST_SECRET = "test-secret-that-is-long-enough-for-hs256-keys"


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(JWT_TEST_SECRET),
        "JWT_ISSUER": "gatekeeper-test",
        "JWT_AUDIENCE": "gatekeeper-test-clients",
        "JWT_EXPIRE_MINUTES": 30,
        "VERIFICATION_TOKEN_TTL_HOURS": 24,
        "MAIL_ENABLED": False,
        "SEED_ON_STARTUP": False,
    }
    values.update(overrides)
    return Settings(**values)


class FakeClock:
    """Frozen clock starting at the current second; tokens it stamps are live for real decoders."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(UTC).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier:
    """Collects (email, name, token) per send; optionally fails like an unreachable SMTP server."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = fail

    def send(self, recipient_email: str, recipient_name: str, token: str) -> bool:
        if self.fail:
            raise MailDeliveryError("SMTP unreachable")
        self.sent.append((recipient_email, recipient_name, token))
        return True

    def last_token_for(self, email: str) -> str:
        return [t for e, _, t in self.sent if e == email][-1]


class _AccountRepo:
    def __init__(self) -> None:
        self.rows: dict[str, Account] = {}

    def get(self, account_id: str) -> Account | None:
        return self.rows.get(account_id)

    def get_by_email(self, email: str) -> Account | None:
        wanted = email.strip().lower()
        return next((a for a in self.rows.values() if a.email == wanted), None)

    def list_all(self) -> list[Account]:
        return list(self.rows.values())

    def add(self, account: Account) -> None:
        if account.id in self.rows or self.get_by_email(account.email) is not None:
            raise DuplicateKeyError("accounts.email")
        self.rows[account.id] = account

    def remove(self, account: Account) -> None:
        self.rows.pop(account.id, None)


class _RoleRepo:
    def __init__(self) -> None:
        self.rows: dict[str, Role] = {}

    def get(self, name: str) -> Role | None:
        return self.rows.get(name)

    def list_all(self) -> list[Role]:
        return sorted(self.rows.values(), key=lambda r: r.name)

    def add(self, role: Role) -> None:
        if role.name in self.rows:
            raise DuplicateKeyError("roles.name")
        self.rows[role.name] = role


class _ModuleRepo:
    def __init__(self) -> None:
        self.rows: dict[int, Module] = {}

    def get(self, module_id: int) -> Module | None:
        return self.rows.get(module_id)

    def get_by_name(self, name: str) -> Module | None:
        return next((m for m in self.rows.values() if m.name == name), None)

    def list_all(self) -> list[Module]:
        return [self.rows[k] for k in sorted(self.rows)]

    def add(self, module: Module) -> None:
        if self.get_by_name(module.name) is not None:
            raise DuplicateKeyError("modules.name")
        module.id = len(self.rows) + 1
        self.rows[module.id] = module


class _PermissionRepo:
    def __init__(self) -> None:
        self.rows: list[RolePermission] = []

    def get(self, role: str, module_id: int) -> RolePermission | None:
        return next(
            (p for p in self.rows if p.role == role and p.module_id == module_id), None
        )

    def list_all(self) -> list[RolePermission]:
        return list(self.rows)

    def add(self, permission: RolePermission) -> None:
        if self.get(permission.role, permission.module_id) is not None:
            raise DuplicateKeyError("uq_role_permissions_role_module")
        permission.id = len(self.rows) + 1
        self.rows.append(permission)


class _ActivityRepo:
    def __init__(self) -> None:
        self.rows: list[ActivityRecord] = []
        self.fail = False

    def add(self, record: ActivityRecord) -> None:
        if self.fail:
            raise RuntimeError("activity table unavailable")
        record.id = len(self.rows) + 1
        self.rows.append(record)

    def list_for_account(self, account_id: str) -> list[ActivityRecord]:
        return [r for r in self.rows if r.account_id == account_id]

    def labels_for(self, account_id: str) -> list[str]:
        return [r.activity for r in self.list_for_account(account_id)]


class InMemoryUnitOfWork:
    """
    Writes apply immediately; commit() only counts calls or raises a queued error.
    """

    def __init__(self) -> None:
        self.accounts = _AccountRepo()
        self.roles = _RoleRepo()
        self.modules = _ModuleRepo()
        self.permissions = _PermissionRepo()
        self.activities = _ActivityRepo()
        self.commits = 0
        self.rollbacks = 0
        self.commit_errors: list[Exception] = []

    def commit(self) -> None:
        if self.commit_errors:
            raise self.commit_errors.pop(0)
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1
