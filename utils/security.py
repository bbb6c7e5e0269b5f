from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from config.settings import settings
from utils.exceptions import AuthError

ACCESS_TOKEN = "access"
RESET_TOKEN = "password_reset"


def get_password_hash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_token(subject: str, token_type: str, expires_delta: timedelta, extra: Optional[Dict[str, Any]] = None) -> str:
    to_encode: Dict[str, Any] = dict(extra or {})
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"sub": subject, "exp": expire, "type": token_type})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str, role: Optional[str] = None) -> str:
    """Bearer token for API calls (sub = account id)."""
    return create_token(
        subject,
        ACCESS_TOKEN,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        extra={"role": role} if role else None,
    )


def create_password_reset_token(subject: str) -> str:
    return create_token(subject, RESET_TOKEN, timedelta(hours=settings.PASSWORD_RESET_EXPIRE_HOURS))


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise AuthError("Could not validate credentials")

    if payload.get("type") != expected_type or not payload.get("sub"):
        raise AuthError("Invalid token type")
    return payload
