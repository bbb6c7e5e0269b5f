from sqlalchemy import Column, String, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.common import TimestampMixin, new_id
from models.classes import SchoolClass
from models.users import User


class Student(TimestampMixin, Base):
    __tablename__ = "students"  # students

    id = Column(String(36), primary_key=True, default=new_id)                       # student ID (PK)
    first_name = Column(String(100), nullable=False)                                # first name
    last_name = Column(String(100), nullable=False)                                 # last name
    date_of_birth = Column(Date)                                                    # date of birth
    student_id = Column(String(50))                                                 # school-issued student number
    class_id = Column(String(36), ForeignKey("classes.id"), nullable=False)         # assigned class (exactly one)
    parent_id = Column(String(36), ForeignKey("users.id"))                          # parent (at most one)
    is_active = Column(Boolean, default=True, nullable=False)                       # active flag

    school_class = relationship(SchoolClass, lazy="joined")
    parent = relationship(User)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
