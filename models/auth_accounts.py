from sqlalchemy import Column, String, DateTime
from database.db import Base
from models.common import new_id, utcnow


class AuthAccount(Base):
    __tablename__ = "auth_accounts"  # sign-in identities (credentials only, profile lives in users)

    id = Column(String(36), primary_key=True, default=new_id)                   # account ID (= users.id)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)  # sign-in phone number
    password_hash = Column(String(128), nullable=False)                         # bcrypt hash
    last_sign_in_at = Column(DateTime(timezone=True))                           # last successful sign-in
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
