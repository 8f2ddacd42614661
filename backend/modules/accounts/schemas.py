"""
modules/accounts/schemas.py — Request/response models for users and sharing.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from core.schemas import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=8)
    display_name: Optional[str] = Field(default=None, max_length=100)
    is_admin: bool = False


class UserResponse(CamelModel):
    id: int
    username: str
    display_name: Optional[str] = None
    is_admin: bool
    is_active: bool
    force_change_password: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(min_length=8)


class SharingRuleUpsert(CamelModel):
    # None targets the owner's global rule
    material_id: Optional[int] = None
    is_public: bool


class SharingRuleResponse(CamelModel):
    id: int
    material_id: Optional[int] = None
    is_public: bool
    updated_at: Optional[datetime] = None
