"""
modules/accounts/models.py — ORM models for users and sharing settings.

Owns tables: users, sharing_rules
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.sql import func

from core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    display_name = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    force_change_password = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    @property
    def public_name(self) -> str:
        return self.display_name or self.username


class SharingRule(Base):
    """Whether an owner's records are publicly visible.

    material_id NULL is the owner's global rule. One rule per
    (owner, material) pair, the NULL pair included.
    """
    __tablename__ = "sharing_rules"
    __table_args__ = (
        UniqueConstraint("owner_id", "material_id", name="uq_sharing_owner_material"),
        # UNIQUE treats NULLs as distinct, so the global rule needs its own index
        Index(
            "uq_sharing_owner_global",
            "owner_id",
            unique=True,
            sqlite_where=text("material_id IS NULL"),
            postgresql_where=text("material_id IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
