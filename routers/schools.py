from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_user, require_roles
from models.schools import School as SchoolModel
from models.users import User
from schemas.schools import School, SchoolCreate, SchoolUpdate
from services.activity_log import record_activity
from utils.exceptions import NotFoundError

router = APIRouter(prefix="/schools", tags=["Schools"])


def _get_school(db: Session, school_id: str) -> SchoolModel:
    school = db.query(SchoolModel).filter(SchoolModel.id == school_id).first()
    if school is None:
        raise NotFoundError("School not found")
    return school


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] add a school
@router.post("/", status_code=201)
def create_school(
    body: SchoolCreate,
    request: Request,
    admin: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    school = SchoolModel(**body.model_dump())
    db.add(school)
    db.flush()
    record_activity(db, admin.id, "school.created", "school", school.id, {"name": school.name}, request)
    db.commit()
    db.refresh(school)
    return {"success": True, "data": School.model_validate(school), "message": "School created"}


# ✅ [READ] list schools
@router.get("/")
def read_schools(
    include_inactive: bool = False,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(SchoolModel)
    if not include_inactive:
        query = query.filter(SchoolModel.is_active.is_(True))
    records = query.order_by(SchoolModel.name).all()
    return {
        "success": True,
        "data": [School.model_validate(r) for r in records],
        "message": "Schools loaded",
    }


# ✅ [READ] one school
@router.get("/{school_id}")
def read_school(school_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"success": True, "data": School.model_validate(_get_school(db, school_id)), "message": "School loaded"}


# ✅ [UPDATE] edit a school
@router.put("/{school_id}")
def update_school(
    school_id: str,
    body: SchoolUpdate,
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    school = _get_school(db, school_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(school, key, value)
    db.commit()
    db.refresh(school)
    return {"success": True, "data": School.model_validate(school), "message": "School updated"}


# ✅ [DELETE] deactivate a school (classes keep their reference)
@router.delete("/{school_id}")
def delete_school(
    school_id: str,
    request: Request,
    admin: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    school = _get_school(db, school_id)
    school.is_active = False
    record_activity(db, admin.id, "school.deactivated", "school", school.id, request=request)
    db.commit()
    return {"success": True, "data": {"school_id": school_id}, "message": "School deactivated"}
