import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_roles
from models.notifications import EmailNotification
from models.users import User
from schemas.common import Pagination, make_meta
from schemas.notifications import EmailNotificationOut, NotificationSendRequest
from services.email_service import EmailService
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


# ✅ [SEND] new-note email for a note
@router.post("/send")
def send_notification(
    body: Optional[NotificationSendRequest] = None,
    user: User = Depends(require_roles("teacher", "admin")),
    db: Session = Depends(get_db),
):
    if body is None or not body.note_id:
        raise ValidationError("Note ID is required")

    if not EmailService(db).send_new_note_notification(body.note_id):
        return JSONResponse(status_code=500, content={"error": "Failed to send notification"})

    logger.info("Notification sent for note %s by %s", body.note_id, user.id)
    return {"success": True}


# ✅ [READ] delivery records
@router.get("/")
def read_notifications(
    note_id: Optional[str] = None,
    user_id: Optional[str] = None,
    paging: Pagination = Depends(),
    _: User = Depends(require_roles("admin")),
    db: Session = Depends(get_db),
):
    query = db.query(EmailNotification)
    if note_id:
        query = query.filter(EmailNotification.note_id == note_id)
    if user_id:
        query = query.filter(EmailNotification.user_id == user_id)

    total = query.count()
    records = (
        query.order_by(EmailNotification.sent_at.desc())
        .offset(paging.offset)
        .limit(paging.size)
        .all()
    )
    return {
        "success": True,
        "data": [EmailNotificationOut.model_validate(r) for r in records],
        "meta": make_meta(total, paging.page, paging.size),
        "message": "Notification records loaded",
    }
