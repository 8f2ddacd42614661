"""Accounts routes — login, me, password change, admin user management, sharing settings."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from core.auth import create_access_token, hash_password, verify_password
from core.db import get_db
from core.dependencies import log_audit, require_admin, require_user
from core.errors import ConflictError, NotFoundError, ValidationError
from core.rate_limit import limiter
from modules.accounts import services
from modules.accounts.models import User
from modules.accounts.schemas import (
    PasswordChange, SharingRuleResponse, SharingRuleUpsert, UserCreate, UserResponse,
)

log = logging.getLogger("spoolvault.api")
router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


# ============== Auth ==============

@router.post("/auth/login", tags=["Auth"])
@limiter.limit("10/minute")
def login(request: Request, form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        log.info(f"Failed login for '{form_data.username}' from {_client_ip(request)}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    user.last_login = datetime.now(timezone.utc)
    db.commit()

    access_token = create_access_token(data={"sub": user.username, "admin": user.is_admin})
    log_audit(db, "auth.login", "user", user.id, details={"username": user.username},
              user_id=user.id, ip=_client_ip(request))
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "force_change_password": user.force_change_password,
    }


@router.get("/auth/me", tags=["Auth"], response_model=UserResponse)
def me(current_user: dict = Depends(require_user), db: Session = Depends(get_db)):
    return db.get(User, current_user["id"])


@router.post("/auth/change-password", tags=["Auth"])
def change_password(body: PasswordChange, current_user: dict = Depends(require_user),
                    db: Session = Depends(get_db)):
    user = db.get(User, current_user["id"])
    if not verify_password(body.current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")
    user.password_hash = hash_password(body.new_password)
    user.force_change_password = False
    db.commit()
    log_audit(db, "auth.change_password", "user", user.id, user_id=user.id)
    return {"detail": "Password changed"}


# ============== Users (admin) ==============

@router.get("/users", tags=["Users"], response_model=list[UserResponse])
def list_users(current_user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return db.query(User).order_by(User.username).all()


@router.post("/users", tags=["Users"], response_model=UserResponse, status_code=201)
def create_user(body: UserCreate, current_user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    if db.query(User.id).filter(User.username == body.username).first() is not None:
        raise ConflictError(f"User '{body.username}' already exists")
    user = User(
        username=body.username,
        display_name=body.display_name,
        password_hash=hash_password(body.password),
        is_admin=body.is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    log_audit(db, "create", "user", user.id, details={"username": user.username},
              user_id=current_user["id"])
    return user


@router.delete("/users/{user_id}", tags=["Users"], status_code=204)
def delete_user(user_id: int, current_user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    if user_id == current_user["id"]:
        raise ValidationError("Cannot delete your own account")
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    username = user.username
    # Records and sharing rules go with the user (ON DELETE CASCADE)
    db.delete(user)
    db.commit()
    log_audit(db, "delete", "user", user_id, details={"username": username},
              user_id=current_user["id"])
    return Response(status_code=204)


# ============== Sharing settings ==============

@router.get("/sharing", tags=["Sharing"], response_model=list[SharingRuleResponse])
def list_sharing_rules(current_user: dict = Depends(require_user), db: Session = Depends(get_db)):
    return services.list_rules(db, current_user["id"])


@router.post("/sharing", tags=["Sharing"], response_model=SharingRuleResponse)
def upsert_sharing_rule(body: SharingRuleUpsert, response: Response,
                        current_user: dict = Depends(require_user), db: Session = Depends(get_db)):
    rule, created = services.upsert_rule(db, current_user["id"], body.material_id, body.is_public)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return rule
