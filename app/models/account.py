"""ORM model for registered accounts (identity, credentials, verification state, role)."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)

from app.models.base import Base


class Account(Base):
    """
    Registered identity.

    email is stored lowercased so the unique index is case-insensitive.
    The verification token and its expiry are set together or cleared together,
    and a verified account never carries a token. version drives optimistic
    concurrency: a write against a row changed underneath it raises StaleDataError.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            "(verification_token IS NULL) = (verification_token_expires_at IS NULL)",
            name="token_expiry_pair",
        ),
        CheckConstraint(
            "NOT email_verified OR verification_token IS NULL",
            name="verified_has_no_token",
        ),
    )

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    email_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(String(128), nullable=True)
    verification_token_expires_at = Column(DateTime(timezone=True), nullable=True)
    role = Column(String(32), ForeignKey("roles.name"), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
