from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_user, require_roles
from models.classes import SchoolClass, TeacherClass
from models.schools import School
from models.students import Student
from models.users import User
from schemas.classes import ClassCreate, ClassOut, ClassUpdate, TeacherAssignment
from schemas.students import StudentOut
from services.access import teacher_class_ids
from utils.exceptions import AuthError, NotFoundError, ValidationError

router = APIRouter(prefix="/classes", tags=["Classes"])


def _get_class(db: Session, class_id: str) -> SchoolClass:
    record = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if record is None:
        raise NotFoundError("Class not found")
    return record


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] add a class
@router.post("/", status_code=201)
def create_class(body: ClassCreate, _: User = Depends(require_roles("admin")), db: Session = Depends(get_db)):
    if db.query(School).filter(School.id == body.school_id).first() is None:
        raise ValidationError("Unknown school_id")
    record = SchoolClass(**body.model_dump())
    db.add(record)
    db.commit()
    db.refresh(record)
    return {"success": True, "data": ClassOut.model_validate(record), "message": "Class created"}


# ✅ [READ] classes visible to the caller (teachers: their assignments)
@router.get("/")
def read_classes(school_id: str = None, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    query = db.query(SchoolClass).filter(SchoolClass.is_active.is_(True))
    if school_id:
        query = query.filter(SchoolClass.school_id == school_id)
    if user.role == "teacher":
        query = query.filter(SchoolClass.id.in_(teacher_class_ids(db, user.id)))
    elif user.role == "parent":
        query = query.filter(
            SchoolClass.id.in_(db.query(Student.class_id).filter(Student.parent_id == user.id))
        )
    records = query.order_by(SchoolClass.name).all()
    return {
        "success": True,
        "data": [ClassOut.model_validate(r) for r in records],
        "message": "Classes loaded",
    }


# ✅ [UPDATE] edit a class
@router.put("/{class_id}")
def update_class(
    class_id: str,
    body: ClassUpdate,
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    record = _get_class(db, class_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(record, key, value)
    db.commit()
    db.refresh(record)
    return {"success": True, "data": ClassOut.model_validate(record), "message": "Class updated"}


# ==========================================================
# [2] Students of a class / teacher assignments
# ==========================================================

# ✅ [READ] active students of a class
@router.get("/{class_id}/students")
def read_class_students(class_id: str, user: User = Depends(require_roles("teacher", "admin")), db: Session = Depends(get_db)):
    _get_class(db, class_id)
    if user.role == "teacher" and class_id not in teacher_class_ids(db, user.id):
        raise AuthError("Not assigned to this class", status_code=403)
    records = (
        db.query(Student)
        .filter(Student.class_id == class_id, Student.is_active.is_(True))
        .order_by(Student.first_name)
        .all()
    )
    return {
        "success": True,
        "data": [StudentOut.model_validate(r) for r in records],
        "message": "Class students loaded",
    }


# ✅ [ASSIGN] teacher -> class
@router.post("/{class_id}/teachers", status_code=201)
def assign_teacher(
    class_id: str,
    body: TeacherAssignment,
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    _get_class(db, class_id)
    teacher = db.query(User).filter(User.id == body.teacher_id).first()
    if teacher is None or teacher.role != "teacher":
        raise ValidationError("teacher_id must reference a teacher")

    db.add(TeacherClass(teacher_id=teacher.id, class_id=class_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Teacher already assigned to this class")
    return {
        "success": True,
        "data": {"class_id": class_id, "teacher_id": teacher.id},
        "message": "Teacher assigned",
    }


# ✅ [UNASSIGN] remove a teacher from a class
@router.delete("/{class_id}/teachers/{teacher_id}")
def unassign_teacher(
    class_id: str,
    teacher_id: str,
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    deleted = (
        db.query(TeacherClass)
        .filter(TeacherClass.class_id == class_id, TeacherClass.teacher_id == teacher_id)
        .delete()
    )
    if not deleted:
        raise NotFoundError("Assignment not found")
    db.commit()
    return {"success": True, "data": {"class_id": class_id, "teacher_id": teacher_id}, "message": "Teacher unassigned"}
