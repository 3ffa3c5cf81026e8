"""ORM model and enumeration for grantable roles."""

from enum import Enum

from sqlalchemy import Column, String

from app.models.base import Base


class RoleName(str, Enum):
    """Closed set of roles an account can hold."""

    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"

    @classmethod
    def parse(cls, value: str | None) -> "RoleName | None":
        """Return the role for an exact name, or None when the name is not a known role."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Role(Base):
    """Grantable role catalog; one row per RoleName that has been created."""

    __tablename__ = "roles"

    name = Column(String(32), primary_key=True)
