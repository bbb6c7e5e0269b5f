from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

NoteStatus = Literal["draft", "published", "archived"]


# ==========================================================
# [Notes]
# ==========================================================
class NoteCreate(BaseModel):
    student_id: str
    note_date: date
    title: Optional[str] = None
    content: str = Field(..., min_length=1)
    status: NoteStatus = "published"
    notify: bool = True                    # email the parent once created


class NoteUpdate(BaseModel):
    note_date: Optional[date] = None
    title: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    status: Optional[NoteStatus] = None


class NoteFilters(BaseModel):
    student_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    keyword: Optional[str] = None
    status: Optional[NoteStatus] = None


class AttachmentOut(BaseModel):
    id: str
    note_id: str
    file_name: str
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteOut(BaseModel):
    id: str
    student_id: str
    teacher_id: str
    note_date: date
    title: Optional[str] = None
    content: str
    status: NoteStatus
    created_at: datetime
    updated_at: datetime
    attachments: List[AttachmentOut] = []
    comment_count: int = 0

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_note(cls, note) -> "NoteOut":
        out = cls.model_validate(note)
        out.comment_count = len(note.comments)
        return out


# ==========================================================
# [Comments]
# ==========================================================
class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentOut(BaseModel):
    id: str
    note_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime
    author_name: str = ""

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_comment(cls, comment) -> "CommentOut":
        out = cls.model_validate(comment)
        if comment.user is not None:
            out.author_name = comment.user.full_name
        return out
