import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session, joinedload, selectinload

from database.db import get_db
from dependencies.security import get_current_user
from models.notes import DailyNote, NoteComment
from models.users import User
from routers.notes import apply_note_filters
from schemas.notes import NoteFilters
from schemas.reports import NoteExportQuery
from services.access import get_visible_student
from services.report_compiler import ReportCompiler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_compiler() -> ReportCompiler:
    return ReportCompiler()


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode("ascii") or "notes.pdf"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


# ✅ [PDF] notes report for one student
@router.get("/students/{student_id}/notes.pdf")
def export_student_notes(
    student_id: str,
    options: NoteExportQuery = Depends(),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    compiler: ReportCompiler = Depends(get_report_compiler),
):
    student = get_visible_student(db, user, student_id)

    # filtering and ordering happen here; the compiler keeps input order
    query = db.query(DailyNote).options(
        joinedload(DailyNote.teacher),
        selectinload(DailyNote.attachments),
        selectinload(DailyNote.comments).joinedload(NoteComment.user),
    )
    filters = NoteFilters(
        student_id=student.id,
        date_from=options.date_from,
        date_to=options.date_to,
        keyword=options.keyword,
        status="published",
    )
    notes = (
        apply_note_filters(query, filters)
        .order_by(DailyNote.note_date.desc(), DailyNote.created_at.desc())
        .all()
    )

    pdf_content = compiler.compile(
        student,
        notes,
        date_from=options.date_from,
        date_to=options.date_to,
        include_comments=options.include_comments,
        include_attachments=options.include_attachments,
    )
    logger.info("Exported %d notes for student %s", len(notes), student.id)

    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(compiler.filename(student))},
    )
