"""
accounts/services.py — User bootstrap, sharing-rule upsert and SharingProvider.

AccountSharingProvider implements the SharingProvider ABC so the inventory
module can read owners and their sharing rules through the registry instead
of importing this module.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import hash_password
from core.errors import ValidationError
from core.interfaces.sharing import OwnerInfo, RuleView, SharingProvider
from modules.accounts.models import SharingRule, User

log = logging.getLogger("spoolvault.api")


def ensure_admin(db: Session, username: str, password: Optional[str]) -> Optional[User]:
    """Create the bootstrap admin when the users table is empty.

    The account must change its password on first login. Does nothing when no
    password is configured or any user already exists.
    """
    if not password:
        return None
    if db.query(User.id).first() is not None:
        return None
    admin = User(
        username=username,
        password_hash=hash_password(password),
        is_admin=True,
        force_change_password=True,
    )
    db.add(admin)
    db.commit()
    log.info(f"Created bootstrap admin account '{username}'")
    return admin


def _find_rule(db: Session, owner_id: int, material_id: Optional[int]) -> Optional[SharingRule]:
    query = db.query(SharingRule).filter(SharingRule.owner_id == owner_id)
    if material_id is None:
        query = query.filter(SharingRule.material_id.is_(None))
    else:
        query = query.filter(SharingRule.material_id == material_id)
    return query.first()


def upsert_rule(db: Session, owner_id: int, material_id: Optional[int], is_public: bool) -> tuple[SharingRule, bool]:
    """Create or update the owner's rule for one material (or the global rule).

    Returns (rule, created).
    """
    rule = _find_rule(db, owner_id, material_id)
    if rule is not None:
        rule.is_public = is_public
        db.commit()
        db.refresh(rule)
        return rule, False

    rule = SharingRule(owner_id=owner_id, material_id=material_id, is_public=is_public)
    db.add(rule)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Either a concurrent insert won the unique index or the material does not exist
        rule = _find_rule(db, owner_id, material_id)
        if rule is None:
            raise ValidationError(f"Unknown material id {material_id}")
        rule.is_public = is_public
        db.commit()
        db.refresh(rule)
        return rule, False
    db.refresh(rule)
    return rule, True


def list_rules(db: Session, owner_id: int) -> list[SharingRule]:
    return (
        db.query(SharingRule)
        .filter(SharingRule.owner_id == owner_id)
        .order_by(SharingRule.material_id.is_not(None), SharingRule.material_id)
        .all()
    )


class AccountSharingProvider(SharingProvider):
    """Concrete SharingProvider backed by the users and sharing_rules tables."""

    def get_owner(self, db, owner_id: int) -> Optional[OwnerInfo]:
        user = db.get(User, owner_id)
        if user is None or not user.is_active:
            return None
        return OwnerInfo(id=user.id, name=user.public_name)

    def get_rules(self, db, owner_id: int) -> list[RuleView]:
        return [
            RuleView(material_id=rule.material_id, is_public=rule.is_public)
            for rule in list_rules(db, owner_id)
        ]
