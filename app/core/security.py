"""Password hashing, verification-token generation and JWT session tokens."""

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 320

# 32 random bytes, URL-safe; well above the entropy of a GUID.
VERIFICATION_TOKEN_BYTES = 32

_REQUIRED_CLAIMS = ["sub", "exp", "iat", "iss", "aud"]


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    account_id: str
    name: str
    email: str
    role: str
    expires_at: datetime


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare inside bcrypt)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def is_valid_email(email: str) -> bool:
    """Shape check for an already-normalized address: local@dotted.domain within EMAIL_MAX_LEN."""
    local, _, domain = email.partition("@")
    return bool(local) and "." in domain and len(email) <= EMAIL_MAX_LEN


def password_policy_violations(plain_password: str) -> list[str]:
    """Return the password rules the candidate breaks (empty list when acceptable)."""
    problems: list[str] = []
    if not (PASSWORD_MIN_LEN <= len(plain_password) <= PASSWORD_MAX_LEN):
        problems.append(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )
    if not re.search(r"\d", plain_password):
        problems.append("Password must contain a digit.")
    if not re.search(r"[a-z]", plain_password):
        problems.append("Password must contain a lowercase letter.")
    if not re.search(r"[A-Z]", plain_password):
        problems.append("Password must contain an uppercase letter.")
    return problems


def generate_verification_token() -> str:
    """Return a fresh high-entropy, URL-safe email verification token."""
    return secrets.token_urlsafe(VERIFICATION_TOKEN_BYTES)


def tokens_match(expected: str | None, supplied: str) -> bool:
    """Constant-time comparison of a stored verification token with a supplied one."""
    if not expected or not supplied:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def create_access_token(
    settings: "Settings",
    *,
    account_id: str,
    name: str,
    email: str,
    role: str,
    now: datetime | None = None,
) -> str:
    """Create a signed JWT carrying account id (sub), name, email, role, iss, aud, iat and exp."""
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(account_id),
        "name": name,
        "email": email,
        "role": role,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "exp": expire,
        "iat": issued_at,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: "Settings") -> TokenClaims | None:
    """
    Validate signature, issuer, audience and expiry; return the claims.

    Returns None for any token that fails a check, including malformed input.
    """
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            leeway=0,
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as e:
        logger.debug("Rejected session token: %s", type(e).__name__)
        return None

    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not isinstance(sub, str) or not role or not isinstance(role, str):
        return None
    return TokenClaims(
        account_id=sub,
        name=str(payload.get("name") or ""),
        email=str(payload.get("email") or ""),
        role=role,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )
