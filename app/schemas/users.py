"""Request schemas for account management endpoints."""

from pydantic import BaseModel, Field

from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN


class UpdateAccountRequest(BaseModel):
    """Partial update: omitted or empty fields are left unchanged."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    email: str | None = Field(default=None, max_length=EMAIL_MAX_LEN)
