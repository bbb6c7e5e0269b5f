from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

UserRole = Literal["parent", "teacher", "admin"]


class UserCreate(BaseModel):
    """Admin-side account creation."""
    phone_number: str
    password: str
    email: Optional[str] = None
    first_name: str
    last_name: str
    role: UserRole = "parent"


class UserUpdate(BaseModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserOut(BaseModel):
    id: str
    phone_number: str
    email: Optional[str] = None
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
