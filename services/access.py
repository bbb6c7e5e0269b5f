"""
services/access.py

Who may see or write what:
- admin   : everything
- teacher : students of the classes assigned to them
- parent  : their own children, published notes only
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from models.classes import TeacherClass
from models.notes import DailyNote
from models.students import Student
from models.users import User
from utils.exceptions import AuthError, NotFoundError


def teacher_class_ids(db: Session, teacher_id: str) -> List[str]:
    rows = db.query(TeacherClass.class_id).filter(TeacherClass.teacher_id == teacher_id).all()
    return [r.class_id for r in rows]


def can_view_student(db: Session, user: User, student: Student) -> bool:
    if user.role == "admin":
        return True
    if user.role == "teacher":
        return student.class_id in teacher_class_ids(db, user.id)
    return student.parent_id == user.id


def can_view_note(db: Session, user: User, note: DailyNote) -> bool:
    if user.role == "parent" and note.status != "published":
        return False
    if user.role == "teacher" and note.teacher_id == user.id:
        return True
    return note.student is not None and can_view_student(db, user, note.student)


def can_write_note(db: Session, user: User, student: Student) -> bool:
    if user.role == "parent":
        return False
    return can_view_student(db, user, student)


def get_student_or_404(db: Session, student_id: str) -> Student:
    student = db.query(Student).filter(Student.id == student_id).first()
    if student is None:
        raise NotFoundError("Student not found")
    return student


def get_visible_student(db: Session, user: User, student_id: str) -> Student:
    student = get_student_or_404(db, student_id)
    if not can_view_student(db, user, student):
        raise AuthError("Not allowed to access this student", status_code=403)
    return student


def get_visible_note(db: Session, user: User, note_id: str) -> DailyNote:
    note = db.query(DailyNote).filter(DailyNote.id == note_id).first()
    # hidden notes look missing to parents
    if note is None or (user.role == "parent" and not can_view_note(db, user, note)):
        raise NotFoundError("Note not found")
    if not can_view_note(db, user, note):
        raise AuthError("Not allowed to access this note", status_code=403)
    return note


def visible_student_ids(db: Session, user: User) -> Optional[List[str]]:
    """Student ids the user may see; None means no restriction (admin)."""
    if user.role == "admin":
        return None
    query = db.query(Student.id)
    if user.role == "teacher":
        query = query.filter(Student.class_id.in_(teacher_class_ids(db, user.id)))
    else:
        query = query.filter(Student.parent_id == user.id)
    return [r.id for r in query.all()]
