from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database.db import get_db
from models.auth_accounts import AuthAccount
from models.users import User
from utils.exceptions import AuthError, NotFoundError
from utils.security import decode_token

# missing header is reported by get_current_user (401)
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing Authorization header")

    payload = decode_token(credentials.credentials)

    # identity first (401), then the profile row (404)
    account = db.query(AuthAccount).filter(AuthAccount.id == payload["sub"]).first()
    if account is None:
        raise AuthError("Unknown account")

    user = db.query(User).filter(User.id == account.id).first()
    if user is None:
        raise NotFoundError("User not found")
    if not user.is_active:
        raise AuthError("Account is deactivated", status_code=403)
    return user


def require_roles(*roles: str):
    """Dependency factory: current user restricted to the given roles."""

    def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise AuthError("Insufficient permissions", status_code=403)
        return user

    return _checker
