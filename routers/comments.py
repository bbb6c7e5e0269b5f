from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_user
from models.notes import NoteComment
from models.users import User
from schemas.notes import CommentCreate, CommentOut
from services.access import get_visible_note
from services.activity_log import record_activity
from utils.exceptions import AuthError, NotFoundError

router = APIRouter(prefix="/notes/{note_id}/comments", tags=["Comments"])


def _own_comment(db: Session, user: User, note_id: str, comment_id: str) -> NoteComment:
    get_visible_note(db, user, note_id)
    comment = (
        db.query(NoteComment)
        .filter(NoteComment.id == comment_id, NoteComment.note_id == note_id)
        .first()
    )
    if comment is None:
        raise NotFoundError("Comment not found")
    if comment.user_id != user.id and user.role != "admin":
        raise AuthError("Only the author can change this comment", status_code=403)
    return comment


# ✅ [READ] comments of a note, oldest first
@router.get("/")
def read_comments(note_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    note = get_visible_note(db, user, note_id)
    return {
        "success": True,
        "data": [CommentOut.from_comment(c) for c in note.comments],
        "message": "Comments loaded",
    }


# ✅ [CREATE] add a comment
@router.post("/", status_code=201)
def create_comment(
    note_id: str,
    body: CommentCreate,
    request: Request,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    note = get_visible_note(db, user, note_id)
    comment = NoteComment(note_id=note.id, user_id=user.id, content=body.content)
    db.add(comment)
    db.flush()
    record_activity(db, user.id, "comment.created", "note_comment", comment.id, {"note_id": note.id}, request)
    db.commit()
    db.refresh(comment)
    return {"success": True, "data": CommentOut.from_comment(comment), "message": "Comment added"}


# ✅ [UPDATE] edit own comment
@router.put("/{comment_id}")
def update_comment(
    note_id: str,
    comment_id: str,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = _own_comment(db, user, note_id, comment_id)
    comment.content = body.content
    db.commit()
    db.refresh(comment)
    return {"success": True, "data": CommentOut.from_comment(comment), "message": "Comment updated"}


# ✅ [DELETE] remove own comment
@router.delete("/{comment_id}")
def delete_comment(
    note_id: str,
    comment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = _own_comment(db, user, note_id, comment_id)
    db.delete(comment)
    db.commit()
    return {"success": True, "data": {"comment_id": comment_id}, "message": "Comment deleted"}
