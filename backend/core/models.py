"""
core/models.py — Core/system ORM models.

Owns tables: audit_logs
"""

from sqlalchemy import Column, String, DateTime, Integer, JSON
from sqlalchemy.sql import func

from core.base import Base


class AuditLog(Base):
    """Audit log for tracking user actions."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    timestamp = Column(DateTime, server_default=func.now())
    user_id = Column(Integer, nullable=True)
    action = Column(String(50), nullable=False)  # e.g., "import", "batch_update", "delete"
    entity_type = Column(String(50))  # e.g., "record", "manufacturer", "color"
    entity_id = Column(Integer)
    details = Column(JSON)  # Additional context
    ip_address = Column(String(45))  # IPv4 or IPv6
