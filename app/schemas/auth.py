"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN, is_valid_email


class RegisterRequest(BaseModel):
    """Self-registration payload."""

    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_LEN, description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Display name")
    role: str = Field(default="User", description="Requested role: Admin, Manager or User")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        s = v.strip()
        if not is_valid_email(s.lower()):
            raise ValueError("Invalid email address")
        return s


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN, description="Email address")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class VerifyEmailRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    token: str = Field(..., min_length=1, max_length=256)


class AccountOut(BaseModel):
    """Public view of an account (no password hash, no verification token)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    email_verified: bool
    role: str


class AuthPayload(BaseModel):
    """Data returned by register / login / verify-email."""

    user: AccountOut
    token: str | None = Field(default=None, description="JWT session token (Bearer)")
    token_type: str | None = Field(default=None, description="Token type when a token is issued")


class CurrentUser(BaseModel):
    """Authenticated caller, resolved from a verified session token."""

    id: str
    name: str
    email: str
    role: str
