import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import get_current_user
from models.auth_accounts import AuthAccount
from models.common import utcnow
from models.users import User
from schemas.auth import (
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileUpdate,
    SignUpRequest,
    TokenResponse,
)
from schemas.users import UserOut
from services.accounts import check_password, create_account
from services.activity_log import record_activity
from services.email_service import EmailService
from utils.exceptions import AuthError
from utils.security import (
    RESET_TOKEN,
    create_access_token,
    create_password_reset_token,
    decode_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ==========================================================
# [1] Sign-up / sign-in
# ==========================================================

# ✅ [SIGNUP] create account + profile
@router.post("/signup", status_code=201)
def signup(body: SignUpRequest, request: Request, db: Session = Depends(get_db)):
    check_password(body.password, body.confirm_password)

    user = create_account(
        db,
        body.phone_number,
        body.password,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
    )
    record_activity(db, user.id, "user.signed_up", "user", user.id, request=request)
    db.commit()
    db.refresh(user)

    if user.email:
        EmailService(db).send_welcome_email(user.id)

    return {
        "success": True,
        "data": UserOut.model_validate(user),
        "message": "Account created successfully",
    }


# ✅ [LOGIN] phone + password -> bearer token
@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    account = db.query(AuthAccount).filter(AuthAccount.phone_number == body.phone_number).first()
    if account is None or not verify_password(body.password, account.password_hash):
        raise AuthError("Invalid phone number or password")

    user = db.query(User).filter(User.id == account.id).first()
    if user is not None and not user.is_active:
        raise AuthError("Account is deactivated", status_code=403)

    now = utcnow()
    account.last_sign_in_at = now
    if user is not None:
        user.last_login = now
    db.commit()

    token = create_access_token(account.id, role=user.role if user else None)
    return {
        "success": True,
        "data": {
            "token": TokenResponse(access_token=token),
            "user": UserOut.model_validate(user) if user else None,
        },
        "message": "Signed in",
    }


# ==========================================================
# [2] Profile
# ==========================================================

# ✅ [READ] own profile
@router.get("/me")
def read_me(user: User = Depends(get_current_user)):
    return {"success": True, "data": UserOut.model_validate(user), "message": "Profile loaded"}


# ✅ [UPDATE] own profile
@router.put("/me")
def update_me(body: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return {"success": True, "data": UserOut.model_validate(user), "message": "Profile updated"}


# ==========================================================
# [3] Password reset
# ==========================================================

# ✅ [RESET] request a reset link (same answer whether or not the phone exists)
@router.post("/password-reset")
def request_password_reset(body: PasswordResetRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.phone_number == body.phone_number).first()
    if user is not None:
        token = create_password_reset_token(user.id)
        reset_link = f"{settings.APP_URL.rstrip('/')}/reset-password?token={token}"
        EmailService(db).send_password_reset_email(user.id, reset_link)
    else:
        logger.info("Password reset requested for unknown phone number")
    return {"success": True, "data": None, "message": "If the account exists, a reset link has been sent"}


# ✅ [RESET] set a new password with the emailed token
@router.post("/password-reset/confirm")
def confirm_password_reset(body: PasswordResetConfirm, db: Session = Depends(get_db)):
    payload = decode_token(body.token, expected_type=RESET_TOKEN)
    check_password(body.new_password)

    account = db.query(AuthAccount).filter(AuthAccount.id == payload["sub"]).first()
    if account is None:
        raise AuthError("Unknown account")

    account.password_hash = get_password_hash(body.new_password)
    record_activity(db, account.id, "user.password_reset", "user", account.id)
    db.commit()
    return {"success": True, "data": None, "message": "Password updated"}
