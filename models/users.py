from sqlalchemy import Column, String, Boolean, DateTime
from database.db import Base
from models.common import TimestampMixin, new_id

USER_ROLES = ("parent", "teacher", "admin")


class User(TimestampMixin, Base):
    __tablename__ = "users"  # portal user profiles

    id = Column(String(36), primary_key=True, default=new_id)                   # user ID
    phone_number = Column(String(20), unique=True, nullable=False, index=True)  # phone number
    email = Column(String(200))                                                 # email (notifications)
    first_name = Column(String(100), nullable=False)                            # first name
    last_name = Column(String(100), nullable=False)                             # last name
    role = Column(String(20), nullable=False, default="parent")                 # parent / teacher / admin
    is_active = Column(Boolean, default=True, nullable=False)                   # account enabled
    last_login = Column(DateTime(timezone=True))                                # last sign-in

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
