"""ORM model for the role x module permission matrix."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint

from app.models.base import Base


class RolePermission(Base):
    """
    One matrix cell: create/read/update/delete grants for a (role, module) pair.

    At most one row per pair, enforced by uq_role_permissions_role_module.
    """

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role", "module_id", name="uq_role_permissions_role_module"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    role = Column(String(32), ForeignKey("roles.name"), nullable=False, index=True)
    module_id = Column(Integer, ForeignKey("modules.id"), nullable=False, index=True)
    can_create = Column(Boolean, nullable=False, default=False)
    can_read = Column(Boolean, nullable=False, default=False)
    can_update = Column(Boolean, nullable=False, default=False)
    can_delete = Column(Boolean, nullable=False, default=False)
