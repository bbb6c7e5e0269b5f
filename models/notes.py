from sqlalchemy import Column, String, Text, Date, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.common import TimestampMixin, new_id, utcnow
from models.students import Student
from models.users import User

NOTE_STATUSES = ("draft", "published", "archived")


class DailyNote(TimestampMixin, Base):
    __tablename__ = "daily_notes"  # daily notes written by teachers

    id = Column(String(36), primary_key=True, default=new_id)                    # note ID
    student_id = Column(String(36), ForeignKey("students.id"), nullable=False)   # student
    teacher_id = Column(String(36), ForeignKey("users.id"), nullable=False)      # author
    note_date = Column(Date, nullable=False)                                     # note date
    title = Column(String(200))                                                  # optional title
    content = Column(Text, nullable=False)                                       # body
    status = Column(String(20), nullable=False, default="published")             # draft / published / archived

    student = relationship(Student)
    teacher = relationship(User)
    attachments = relationship(
        "NoteAttachment",
        back_populates="note",
        cascade="all, delete-orphan",
        order_by="NoteAttachment.uploaded_at",
    )
    comments = relationship(
        "NoteComment",
        back_populates="note",
        cascade="all, delete-orphan",
        order_by="NoteComment.created_at",
    )


class NoteAttachment(Base):
    __tablename__ = "note_attachments"  # files attached to a note

    id = Column(String(36), primary_key=True, default=new_id)                        # attachment ID
    note_id = Column(String(36), ForeignKey("daily_notes.id"), nullable=False)       # owning note
    file_name = Column(String(255), nullable=False)                                  # original file name
    file_path = Column(String(500), nullable=False)                                  # storage path
    file_size = Column(Integer)                                                      # bytes
    file_type = Column(String(100))                                                  # media type
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    note = relationship(DailyNote, back_populates="attachments")


class NoteComment(TimestampMixin, Base):
    __tablename__ = "note_comments"  # comments on a note

    id = Column(String(36), primary_key=True, default=new_id)                    # comment ID
    note_id = Column(String(36), ForeignKey("daily_notes.id"), nullable=False)   # owning note
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)         # author
    content = Column(Text, nullable=False)                                       # body

    note = relationship(DailyNote, back_populates="comments")
    user = relationship(User)
