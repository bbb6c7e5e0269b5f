from typing import Optional
from pydantic import BaseModel, ConfigDict


class ClassCreate(BaseModel):
    school_id: str                      # owning school
    name: str                           # class name
    grade_level: Optional[str] = None   # grade level
    academic_year: str                  # e.g. 2025-2026
    is_active: bool = True


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    grade_level: Optional[str] = None
    academic_year: Optional[str] = None
    is_active: Optional[bool] = None


class ClassOut(ClassCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class TeacherAssignment(BaseModel):
    teacher_id: str
