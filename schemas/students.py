from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict


# ==========================================================
# [Input]
# ==========================================================
class StudentCreate(BaseModel):
    first_name: str                        # first name
    last_name: str                         # last name
    date_of_birth: Optional[date] = None   # date of birth
    student_id: Optional[str] = None       # school-issued number
    class_id: str                          # assigned class
    parent_id: Optional[str] = None        # parent user
    is_active: bool = True


class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    student_id: Optional[str] = None
    class_id: Optional[str] = None
    parent_id: Optional[str] = None
    is_active: Optional[bool] = None


# ==========================================================
# [Output]
# ==========================================================
class StudentOut(StudentCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)
