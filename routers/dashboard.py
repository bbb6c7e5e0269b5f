from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from database.db import get_db
from dependencies.security import require_roles
from models.activity_logs import ActivityLog
from models.classes import SchoolClass
from models.notes import DailyNote
from models.schools import School as SchoolModel
from models.students import Student
from models.users import User
from schemas.classes import ClassOut
from schemas.notes import NoteOut
from schemas.schools import School
from schemas.students import StudentOut
from services.access import teacher_class_ids

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

RECENT_LIMIT = 10


# ==========================================================
# [1] Parent
# ==========================================================

# ✅ [PARENT] children + their recent published notes
@router.get("/parent")
def parent_dashboard(user: User = Depends(require_roles("parent")), db: Session = Depends(get_db)):
    students = (
        db.query(Student)
        .filter(Student.parent_id == user.id, Student.is_active.is_(True))
        .order_by(Student.first_name)
        .all()
    )
    notes_query = db.query(DailyNote).filter(
        DailyNote.student_id.in_([s.id for s in students]),
        DailyNote.status == "published",
    )
    recent = (
        notes_query.options(selectinload(DailyNote.attachments), selectinload(DailyNote.comments))
        .order_by(DailyNote.note_date.desc(), DailyNote.created_at.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return {
        "success": True,
        "data": {
            "students": [StudentOut.model_validate(s) for s in students],
            "recent_notes": [NoteOut.from_note(n) for n in recent],
            "total_notes": notes_query.count(),
        },
        "message": "Parent dashboard loaded",
    }


# ==========================================================
# [2] Teacher
# ==========================================================

# ✅ [TEACHER] classes, students, recent + draft notes
@router.get("/teacher")
def teacher_dashboard(user: User = Depends(require_roles("teacher")), db: Session = Depends(get_db)):
    class_ids = teacher_class_ids(db, user.id)
    classes = db.query(SchoolClass).filter(SchoolClass.id.in_(class_ids)).order_by(SchoolClass.name).all()
    students = (
        db.query(Student)
        .filter(Student.class_id.in_(class_ids), Student.is_active.is_(True))
        .order_by(Student.first_name)
        .all()
    )
    own_notes = db.query(DailyNote).options(
        selectinload(DailyNote.attachments), selectinload(DailyNote.comments)
    ).filter(DailyNote.teacher_id == user.id)
    recent = (
        own_notes.filter(DailyNote.status == "published")
        .order_by(DailyNote.created_at.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    drafts = own_notes.filter(DailyNote.status == "draft").order_by(DailyNote.updated_at.desc()).all()
    return {
        "success": True,
        "data": {
            "classes": [ClassOut.model_validate(c) for c in classes],
            "students": [StudentOut.model_validate(s) for s in students],
            "recent_notes": [NoteOut.from_note(n) for n in recent],
            "pending_notes": [NoteOut.from_note(n) for n in drafts],
        },
        "message": "Teacher dashboard loaded",
    }


# ==========================================================
# [3] Admin
# ==========================================================

# ✅ [ADMIN] counts, schools, recent activity
@router.get("/admin")
def admin_dashboard(_: User = Depends(require_roles("admin")), db: Session = Depends(get_db)):
    schools = db.query(SchoolModel).filter(SchoolModel.is_active.is_(True)).order_by(SchoolModel.name).all()
    activity = db.query(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(RECENT_LIMIT).all()
    return {
        "success": True,
        "data": {
            "total_users": db.query(User).count(),
            "total_students": db.query(Student).count(),
            "total_notes": db.query(DailyNote).count(),
            "schools": [School.model_validate(s) for s in schools],
            "recent_activity": [
                {
                    "id": a.id,
                    "user_id": a.user_id,
                    "action": a.action,
                    "resource_type": a.resource_type,
                    "resource_id": a.resource_id,
                    "details": a.details,
                    "created_at": a.created_at,
                }
                for a in activity
            ],
        },
        "message": "Admin dashboard loaded",
    }
