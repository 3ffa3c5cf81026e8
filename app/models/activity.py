"""ORM model for append-only account activity (audit) records."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


class ActivityRecord(Base):
    """
    Audit entry: who did what and when.

    account_id is deliberately not a foreign key: records outlive the account they reference.
    """

    __tablename__ = "activity_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(36), nullable=False, index=True)
    activity = Column(String(255), nullable=False)
    occurred_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
