from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base
from models.common import TimestampMixin, new_id, utcnow
from models.schools import School
from models.users import User


class SchoolClass(TimestampMixin, Base):
    __tablename__ = "classes"  # classes (one school each)

    id = Column(String(36), primary_key=True, default=new_id)                      # class ID
    school_id = Column(String(36), ForeignKey("schools.id"), nullable=False)       # owning school
    name = Column(String(100), nullable=False)                                     # class name
    grade_level = Column(String(20))                                               # grade level
    academic_year = Column(String(20), nullable=False)                             # e.g. 2025-2026
    is_active = Column(Boolean, default=True, nullable=False)                      # active flag

    school = relationship(School, lazy="joined")


class TeacherClass(Base):
    __tablename__ = "teacher_classes"  # teacher <-> class assignments
    __table_args__ = (UniqueConstraint("teacher_id", "class_id", name="uq_teacher_class"),)

    id = Column(String(36), primary_key=True, default=new_id)
    teacher_id = Column(String(36), ForeignKey("users.id"), nullable=False)    # teacher
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False)    # class
    assigned_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    teacher = relationship(User)
    school_class = relationship(SchoolClass)
