from typing import Literal, Optional
from pydantic import BaseModel, Field


# ==========================================================
# [Input]
# ==========================================================
class SignUpRequest(BaseModel):
    phone_number: str = Field(..., min_length=5, max_length=20)
    email: Optional[str] = None
    password: str
    confirm_password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Literal["parent", "teacher"] = "parent"


class LoginRequest(BaseModel):
    phone_number: str
    password: str


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class PasswordResetRequest(BaseModel):
    phone_number: str


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str


# ==========================================================
# [Output]
# ==========================================================
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
