from typing import Optional

from sqlalchemy.orm import Session

from models.auth_accounts import AuthAccount
from models.users import User
from utils.exceptions import ValidationError
from utils.security import get_password_hash

MIN_PASSWORD_LENGTH = 6


def check_password(password: str, confirm: Optional[str] = None):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if confirm is not None and password != confirm:
        raise ValidationError("Passwords do not match")


def create_account(db: Session, phone_number: str, password: str, **profile) -> User:
    """Identity account + profile row sharing one id. Caller commits."""
    if db.query(AuthAccount).filter(AuthAccount.phone_number == phone_number).first():
        raise ValidationError("Phone number already registered")

    account = AuthAccount(phone_number=phone_number, password_hash=get_password_hash(password))
    db.add(account)
    db.flush()

    user = User(id=account.id, phone_number=phone_number, **profile)
    db.add(user)
    db.flush()
    return user
