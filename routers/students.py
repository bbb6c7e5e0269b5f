from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_user, require_roles
from models.classes import SchoolClass
from models.students import Student as StudentModel
from models.users import User
from schemas.common import Pagination, make_meta
from schemas.students import StudentCreate, StudentOut, StudentUpdate
from services.access import can_write_note, get_visible_student, teacher_class_ids
from services.activity_log import record_activity
from utils.exceptions import AuthError, ValidationError

router = APIRouter(prefix="/students", tags=["Students"])


def _check_refs(db: Session, class_id: Optional[str], parent_id: Optional[str]):
    if class_id and db.query(SchoolClass).filter(SchoolClass.id == class_id).first() is None:
        raise ValidationError("Unknown class_id")
    if parent_id:
        parent = db.query(User).filter(User.id == parent_id).first()
        if parent is None or parent.role != "parent":
            raise ValidationError("parent_id must reference a parent")


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] add a student
@router.post("/", status_code=201)
def create_student(
    student: StudentCreate,
    request: Request,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    _check_refs(db, student.class_id, student.parent_id)
    if user.role == "teacher" and student.class_id not in teacher_class_ids(db, user.id):
        raise AuthError("Not assigned to this class", status_code=403)

    db_student = StudentModel(**student.model_dump())
    db.add(db_student)
    db.flush()
    record_activity(db, user.id, "student.created", "student", db_student.id, request=request)
    db.commit()
    db.refresh(db_student)
    return {"success": True, "data": StudentOut.model_validate(db_student), "message": "Student created"}


# ✅ [READ] students visible to the caller
@router.get("/")
def read_students(
    class_id: Optional[str] = None,
    parent_id: Optional[str] = None,
    name: Optional[str] = None,
    include_inactive: bool = False,
    paging: Pagination = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(StudentModel)
    if user.role == "teacher":
        query = query.filter(StudentModel.class_id.in_(teacher_class_ids(db, user.id)))
    elif user.role == "parent":
        query = query.filter(StudentModel.parent_id == user.id)

    if class_id:
        query = query.filter(StudentModel.class_id == class_id)
    if parent_id:
        query = query.filter(StudentModel.parent_id == parent_id)
    if name:
        like = f"%{name}%"
        query = query.filter(or_(StudentModel.first_name.ilike(like), StudentModel.last_name.ilike(like)))
    if not include_inactive:
        query = query.filter(StudentModel.is_active.is_(True))

    total = query.count()
    records = (
        query.order_by(StudentModel.first_name, StudentModel.last_name)
        .offset(paging.offset)
        .limit(paging.size)
        .all()
    )
    return {
        "success": True,
        "data": [StudentOut.model_validate(r) for r in records],
        "meta": make_meta(total, paging.page, paging.size),
        "message": "Students loaded",
    }


# ✅ [READ] one student
@router.get("/{student_id}")
def read_student(student_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    student = get_visible_student(db, user, student_id)
    return {"success": True, "data": StudentOut.model_validate(student), "message": "Student loaded"}


# ✅ [UPDATE] edit a student
@router.put("/{student_id}")
def update_student(
    student_id: str,
    updated: StudentUpdate,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    student = get_visible_student(db, user, student_id)
    changes = updated.model_dump(exclude_unset=True)
    _check_refs(db, changes.get("class_id"), changes.get("parent_id"))

    for key, value in changes.items():
        setattr(student, key, value)
    db.commit()
    db.refresh(student)
    return {"success": True, "data": StudentOut.model_validate(student), "message": "Student updated"}


# ✅ [DELETE] deactivate a student (notes are kept)
@router.delete("/{student_id}")
def delete_student(
    student_id: str,
    request: Request,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    student = get_visible_student(db, user, student_id)
    if not can_write_note(db, user, student):
        raise AuthError("Not allowed to modify this student", status_code=403)
    student.is_active = False
    record_activity(db, user.id, "student.deactivated", "student", student.id, request=request)
    db.commit()
    return {"success": True, "data": {"student_id": student_id}, "message": "Student deactivated"}
