"""
SpoolVault — Core auth/request dependencies.

Provides the get_current_user FastAPI dependency (resolves the caller from a
JWT Bearer token), the get_scope / require_admin guards built on it, and the
log_audit utility.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.auth import decode_token
from core.db import get_db
from core.models import AuditLog
from core.scope import Scope

log = logging.getLogger("spoolvault.api")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[dict]:
    """Resolve the current user from an Authorization: Bearer <JWT> header.

    Returns the users row as a dict, or None when no valid token is present.
    """
    if not token:
        return None
    token_data = decode_token(token)
    if not token_data:
        return None
    user = db.execute(
        text("SELECT * FROM users WHERE username = :username"),
        {"username": token_data.username},
    ).fetchone()
    if not user:
        return None
    return dict(user._mapping)


def get_scope(current_user: Optional[dict] = Depends(get_current_user)) -> Scope:
    """Owner scope for record-store calls. 401 when unauthenticated."""
    if not current_user:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Scope(owner_id=current_user["id"])


def require_user(current_user: Optional[dict] = Depends(get_current_user)) -> dict:
    if not current_user:
        raise HTTPException(status_code=401, detail="Authentication required")
    return current_user


def require_admin(current_user: dict = Depends(require_user)) -> dict:
    if not current_user.get("is_admin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def log_audit(
    db: Session,
    action: str,
    entity_type: str = None,
    entity_id: int = None,
    details: dict = None,
    user_id: int = None,
    ip: str = None,
):
    """Log an action to the audit log."""
    entry = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
        user_id=user_id,
        ip_address=ip,
    )
    db.add(entry)
    db.commit()
