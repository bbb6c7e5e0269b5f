from typing import Optional
from pydantic import BaseModel, ConfigDict


class SchoolCreate(BaseModel):
    name: str                          # school name
    address: Optional[str] = None      # address
    phone: Optional[str] = None        # phone
    email: Optional[str] = None        # email
    is_active: bool = True


class SchoolUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None


class School(SchoolCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)
