"""ORM model for protected modules (named resource areas)."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class Module(Base):
    """A named protected area such as "User Management"; referenced by permission rows."""

    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
