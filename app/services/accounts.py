"""Account lifecycle: registration, email verification, login, profile update and deletion."""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING

from app.core.errors import (
    AccountNotFoundError,
    AlreadyVerifiedError,
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidRoleError,
    ValidationError,
    WeakPasswordError,
)
from app.core.security import (
    NAME_MAX_LEN,
    create_access_token,
    generate_verification_token,
    hash_password,
    is_valid_email,
    password_policy_violations,
    tokens_match,
    verify_password,
)
from app.models import Account, Role, RoleName
from app.repositories.base import DuplicateKeyError, StaleEntityError, UnitOfWork
from app.services.activity_log import (
    ACTIVITY_ACCOUNT_DELETED,
    ACTIVITY_EMAIL_VERIFIED,
    ACTIVITY_LOGGED_IN,
    ACTIVITY_PROFILE_UPDATED,
    ACTIVITY_REGISTERED,
    ActivityLogWriter,
)
from app.services.mailer import MailDeliveryError, VerificationNotifier

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Role reported for accounts that hold none; authorization still denies them.
FALLBACK_ROLE = RoleName.USER


@dataclass(frozen=True)
class AccountView:
    """Public projection of an account (no credentials, no verification token)."""

    id: str
    name: str
    email: str
    email_verified: bool
    role: str


@dataclass(frozen=True)
class AuthResult:
    message: str
    account: AccountView
    token: str | None = None


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_email(email: str) -> str:
    normalized = normalize_email(email)
    if not is_valid_email(normalized):
        raise ValidationError("Invalid email address.")
    return normalized


def _validate_name(name: str) -> str:
    stripped = (name or "").strip()
    if not stripped or len(stripped) > NAME_MAX_LEN:
        raise ValidationError(f"Name must be 1-{NAME_MAX_LEN} characters.")
    return stripped


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    """Hash checked against when no account matches, so both failures cost the same."""
    return hash_password(uuid.uuid4().hex)


def to_view(account: Account) -> AccountView:
    return AccountView(
        id=account.id,
        name=account.name,
        email=account.email,
        email_verified=bool(account.email_verified),
        role=account.role or FALLBACK_ROLE.value,
    )


class AccountService:
    """Orchestrates the account lifecycle over a unit of work, a token codec and a notifier."""

    def __init__(
        self,
        uow: UnitOfWork,
        settings: "Settings",
        notifier: VerificationNotifier,
        activity_log: ActivityLogWriter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uow = uow
        self._settings = settings
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(UTC))
        self._activity = activity_log or ActivityLogWriter(uow, clock=self._clock)

    # -- registration / verification / login ------------------------------------------

    def register(self, email: str, password: str, name: str, requested_role: str) -> AuthResult:
        """Create an unverified account and send its verification token. No session token yet."""
        normalized = _validate_email(email)
        if self._uow.accounts.get_by_email(normalized) is not None:
            raise DuplicateEmailError()
        role = RoleName.parse(requested_role)
        if role is None:
            raise InvalidRoleError()
        problems = password_policy_violations(password)
        if problems:
            raise WeakPasswordError(" ".join(problems))
        display_name = _validate_name(name)

        self._ensure_role(role)
        token, expires_at = self._new_verification_token()
        account = Account(
            id=str(uuid.uuid4()),
            email=normalized,
            name=display_name,
            password_hash=hash_password(password),
            email_verified=False,
            verification_token=token,
            verification_token_expires_at=expires_at,
            role=role.value,
        )
        try:
            self._uow.accounts.add(account)
            self._uow.commit()
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration of the same email.
            raise DuplicateEmailError() from e

        logger.info("Account registered", extra={"account_id": account.id, "role": role.value})
        self._notify(account.email, account.name, token)
        self._activity.append(account.id, ACTIVITY_REGISTERED)
        return AuthResult(
            message="Registration successful. Please verify your email.",
            account=to_view(account),
        )

    def login(self, email: str, password: str) -> AuthResult:
        account = self._uow.accounts.get_by_email(normalize_email(email))
        if account is None:
            verify_password(password, _dummy_password_hash())
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()
        if not verify_password(password, account.password_hash):
            logger.info("Login failed: bad password", extra={"account_id": account.id})
            raise InvalidCredentialsError()
        if not account.email_verified:
            raise EmailNotVerifiedError()

        token = self._issue_session_token(account)
        logger.info("Login succeeded", extra={"account_id": account.id})
        self._activity.append(account.id, ACTIVITY_LOGGED_IN)
        return AuthResult(message="Login successful.", account=to_view(account), token=token)

    def verify_email(self, email: str, token: str) -> AuthResult:
        """Mark the email verified, clear the token and return a fresh session token."""
        account = self._uow.accounts.get_by_email(normalize_email(email))
        if account is None:
            raise AccountNotFoundError()
        if account.email_verified:
            raise AlreadyVerifiedError()
        expires_at = account.verification_token_expires_at
        if (
            not tokens_match(account.verification_token, token)
            or expires_at is None
            or self._clock() > _as_utc(expires_at)
        ):
            raise InvalidOrExpiredTokenError()

        account.email_verified = True
        account.verification_token = None
        account.verification_token_expires_at = None
        self._commit_account(account.id)

        logger.info("Email verified", extra={"account_id": account.id})
        self._activity.append(account.id, ACTIVITY_EMAIL_VERIFIED)
        return AuthResult(
            message="Email verification successful.",
            account=to_view(account),
            token=self._issue_session_token(account),
        )

    # -- profile management ---------------------------------------------------------

    def list_accounts(self) -> list[AccountView]:
        return [to_view(a) for a in self._uow.accounts.list_all()]

    def get_account(self, account_id: str) -> AccountView:
        account = self._uow.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError()
        return to_view(account)

    def update_profile(
        self,
        account_id: str,
        new_name: str | None = None,
        new_email: str | None = None,
    ) -> bool:
        """
        Apply only the supplied fields. A changed email resets verification and
        re-sends a token; a name-only change leaves verification untouched.
        """
        account = self._uow.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError()

        if new_name is not None and new_name.strip():
            account.name = _validate_name(new_name)

        email_changed = False
        token = None
        if new_email is not None and new_email.strip():
            normalized = _validate_email(new_email)
            if normalized != account.email:
                existing = self._uow.accounts.get_by_email(normalized)
                if existing is not None and existing.id != account.id:
                    self._uow.rollback()
                    raise DuplicateEmailError()
                token, expires_at = self._new_verification_token()
                account.email = normalized
                account.email_verified = False
                account.verification_token = token
                account.verification_token_expires_at = expires_at
                email_changed = True

        try:
            self._commit_account(account_id)
        except DuplicateKeyError as e:
            raise DuplicateEmailError() from e

        logger.info(
            "Account profile updated",
            extra={"account_id": account_id, "email_changed": email_changed},
        )
        if email_changed and token is not None:
            self._notify(account.email, account.name, token)
        self._activity.append(account_id, ACTIVITY_PROFILE_UPDATED)
        return True

    def delete_account(self, account_id: str) -> bool:
        """Hard-delete the account; its activity records are kept."""
        account = self._uow.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError()
        self._uow.accounts.remove(account)
        self._commit_account(account_id)
        logger.info("Account deleted", extra={"account_id": account_id})
        self._activity.append(account_id, ACTIVITY_ACCOUNT_DELETED)
        return True

    # -- helpers ----------------------------------------------------------------------

    def _ensure_role(self, role: RoleName) -> None:
        if self._uow.roles.get(role.value) is not None:
            return
        try:
            self._uow.roles.add(Role(name=role.value))
        except DuplicateKeyError:
            # Created concurrently; it exists now, which is all we need.
            logger.debug("Role %s created concurrently", role.value)

    def _new_verification_token(self) -> tuple[str, datetime]:
        expires_at = self._clock() + timedelta(hours=self._settings.VERIFICATION_TOKEN_TTL_HOURS)
        return generate_verification_token(), expires_at

    def _issue_session_token(self, account: Account) -> str:
        return create_access_token(
            self._settings,
            account_id=account.id,
            name=account.name,
            email=account.email,
            role=account.role or FALLBACK_ROLE.value,
            now=self._clock(),
        )

    def _commit_account(self, account_id: str) -> None:
        """Commit; on a concurrent-modification conflict report NotFound if the row vanished."""
        try:
            self._uow.commit()
        except StaleEntityError:
            if self._uow.accounts.get(account_id) is None:
                raise AccountNotFoundError()
            raise

    def _notify(self, email: str, name: str, token: str) -> None:
        try:
            self._notifier.send(email, name, token)
        except MailDeliveryError as e:
            logger.warning(
                "Verification email not delivered",
                extra={"recipient": email, "reason": e.message[:200]},
            )
