import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from database.db import get_db
from dependencies.security import get_current_user, require_roles
from models.notes import DailyNote, NoteAttachment
from models.notifications import EmailNotification
from models.users import User
from schemas.common import Pagination, make_meta
from schemas.notes import AttachmentOut, NoteCreate, NoteFilters, NoteOut, NoteUpdate
from services.access import can_write_note, get_visible_note, get_visible_student, visible_student_ids
from services.activity_log import record_activity
from services.email_service import EmailService
from services.storage import LocalFileStorage, get_storage
from utils.exceptions import AuthError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["Daily notes"])


def apply_note_filters(query, filters: NoteFilters):
    """Date range, keyword (title/content) and status filters on a DailyNote query."""
    if filters.student_id:
        query = query.filter(DailyNote.student_id == filters.student_id)
    if filters.date_from:
        query = query.filter(DailyNote.note_date >= filters.date_from)
    if filters.date_to:
        query = query.filter(DailyNote.note_date <= filters.date_to)
    if filters.keyword:
        like = f"%{filters.keyword}%"
        query = query.filter(or_(DailyNote.title.ilike(like), DailyNote.content.ilike(like)))
    if filters.status:
        query = query.filter(DailyNote.status == filters.status)
    return query


def _writable_note(db: Session, user: User, note_id: str) -> DailyNote:
    note = get_visible_note(db, user, note_id)
    if user.role == "teacher" and note.teacher_id != user.id:
        raise AuthError("Only the author can modify this note", status_code=403)
    return note


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] write a note (and email the parent)
@router.post("/", status_code=201)
def create_note(
    body: NoteCreate,
    request: Request,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    student = get_visible_student(db, user, body.student_id)
    if not can_write_note(db, user, student):
        raise AuthError("Not allowed to write notes for this student", status_code=403)

    note = DailyNote(**body.model_dump(exclude={"notify"}), teacher_id=user.id)
    db.add(note)
    db.flush()
    record_activity(db, user.id, "note.created", "daily_note", note.id, {"student_id": student.id}, request)
    db.commit()
    db.refresh(note)

    notified = False
    if body.notify and note.status == "published" and student.parent_id:
        notified = EmailService(db).send_new_note_notification(note.id)
        if not notified:
            logger.error("Failed to send email notification for note %s", note.id)

    return {
        "success": True,
        "data": {"note": NoteOut.from_note(note), "notified": notified},
        "message": "Note created",
    }


# ✅ [READ] notes visible to the caller, filtered + paginated
@router.get("/")
def read_notes(
    filters: NoteFilters = Depends(),
    paging: Pagination = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(DailyNote).options(selectinload(DailyNote.attachments), selectinload(DailyNote.comments))

    student_ids = visible_student_ids(db, user)
    if user.role == "teacher":
        query = query.filter(or_(DailyNote.student_id.in_(student_ids), DailyNote.teacher_id == user.id))
    elif student_ids is not None:
        query = query.filter(DailyNote.student_id.in_(student_ids))
    if user.role == "parent":
        query = query.filter(DailyNote.status == "published")

    query = apply_note_filters(query, filters)
    total = query.count()
    records = (
        query.order_by(DailyNote.note_date.desc(), DailyNote.created_at.desc())
        .offset(paging.offset)
        .limit(paging.size)
        .all()
    )
    return {
        "success": True,
        "data": [NoteOut.from_note(r) for r in records],
        "meta": make_meta(total, paging.page, paging.size),
        "message": "Notes loaded",
    }


# ✅ [READ] one note
@router.get("/{note_id}")
def read_note(note_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    note = get_visible_note(db, user, note_id)
    return {"success": True, "data": NoteOut.from_note(note), "message": "Note loaded"}


# ✅ [UPDATE] edit a note (author or admin)
@router.put("/{note_id}")
def update_note(
    note_id: str,
    body: NoteUpdate,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    note = _writable_note(db, user, note_id)
    for key, value in body.model_dump(exclude_unset=True).items():
        setattr(note, key, value)
    db.commit()
    db.refresh(note)
    return {"success": True, "data": NoteOut.from_note(note), "message": "Note updated"}


# ✅ [DELETE] remove a note with its attachments and comments
@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    request: Request,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    note = _writable_note(db, user, note_id)
    paths = [a.file_path for a in note.attachments]
    db.query(EmailNotification).filter(EmailNotification.note_id == note.id).delete()
    db.delete(note)
    record_activity(db, user.id, "note.deleted", "daily_note", note_id, request=request)
    db.commit()
    for path in paths:
        storage.delete(path)
    return {"success": True, "data": {"note_id": note_id}, "message": "Note deleted"}


# ==========================================================
# [2] Attachments
# ==========================================================

# ✅ [UPLOAD] attach a file
@router.post("/{note_id}/attachments", status_code=201)
def upload_attachment(
    note_id: str,
    file: UploadFile = File(...),
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    note = _writable_note(db, user, note_id)
    file_name = file.filename or "attachment"
    file_path = storage.build_path(note.student_id, file_name)
    size = storage.save(file_path, file.file)

    attachment = NoteAttachment(
        note_id=note.id,
        file_name=file_name,
        file_path=file_path,
        file_size=size,
        file_type=file.content_type,
    )
    db.add(attachment)
    db.commit()
    db.refresh(attachment)
    return {"success": True, "data": AttachmentOut.model_validate(attachment), "message": "Attachment uploaded"}


# ✅ [READ] attachments of a note
@router.get("/{note_id}/attachments")
def read_attachments(note_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    note = get_visible_note(db, user, note_id)
    return {
        "success": True,
        "data": [AttachmentOut.model_validate(a) for a in note.attachments],
        "message": "Attachments loaded",
    }


def _get_attachment(note: DailyNote, attachment_id: str) -> NoteAttachment:
    for attachment in note.attachments:
        if attachment.id == attachment_id:
            return attachment
    raise NotFoundError("Attachment not found")


# ✅ [DOWNLOAD] stream an attachment
@router.get("/{note_id}/attachments/{attachment_id}")
def download_attachment(
    note_id: str,
    attachment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    attachment = _get_attachment(get_visible_note(db, user, note_id), attachment_id)
    return FileResponse(
        storage.path_for(attachment.file_path),
        media_type=attachment.file_type or "application/octet-stream",
        filename=attachment.file_name,
    )


# ✅ [DELETE] remove an attachment
@router.delete("/{note_id}/attachments/{attachment_id}")
def delete_attachment(
    note_id: str,
    attachment_id: str,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    attachment = _get_attachment(_writable_note(db, user, note_id), attachment_id)
    path = attachment.file_path
    db.delete(attachment)
    db.commit()
    storage.delete(path)
    return {"success": True, "data": {"attachment_id": attachment_id}, "message": "Attachment deleted"}
