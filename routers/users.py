from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_roles
from models.users import User
from schemas.common import Pagination, make_meta
from schemas.users import UserCreate, UserOut, UserRole, UserUpdate
from services.accounts import check_password, create_account
from services.activity_log import record_activity
from utils.exceptions import NotFoundError

router = APIRouter(prefix="/users", tags=["Users"])


# ✅ [CREATE] admin creates an account (any role)
@router.post("/", status_code=201)
def create_user(
    body: UserCreate,
    request: Request,
    admin: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    check_password(body.password)
    user = create_account(
        db,
        body.phone_number,
        body.password,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
    )
    record_activity(db, admin.id, "user.created", "user", user.id, {"role": user.role}, request)
    db.commit()
    db.refresh(user)
    return {"success": True, "data": UserOut.model_validate(user), "message": "User created"}


# ✅ [READ] list / search users
@router.get("/")
def read_users(
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    paging: Pagination = Depends(),
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if search:
        like = f"%{search}%"
        query = query.filter(
            or_(User.first_name.ilike(like), User.last_name.ilike(like), User.phone_number.like(like))
        )
    total = query.count()
    records = query.order_by(User.last_name, User.first_name).offset(paging.offset).limit(paging.size).all()
    return {
        "success": True,
        "data": [UserOut.model_validate(r) for r in records],
        "meta": make_meta(total, paging.page, paging.size),
        "message": "Users loaded",
    }


# ✅ [UPDATE] role / activation / contact details
@router.put("/{user_id}")
def update_user(
    user_id: str,
    body: UserUpdate,
    request: Request,
    admin: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")

    changes = body.model_dump(exclude_unset=True)
    for key, value in changes.items():
        setattr(user, key, value)
    record_activity(db, admin.id, "user.updated", "user", user.id, changes, request)
    db.commit()
    db.refresh(user)
    return {"success": True, "data": UserOut.model_validate(user), "message": "User updated"}
