from sqlalchemy import Column, String, DateTime, ForeignKey
from database.db import Base
from models.common import new_id, utcnow


class EmailNotification(Base):
    __tablename__ = "email_notifications"  # delivery records of notification emails

    id = Column(String(36), primary_key=True, default=new_id)                    # record ID
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)         # recipient
    note_id = Column(String(36), ForeignKey("daily_notes.id"), nullable=False)   # note that triggered it
    email_type = Column(String(50), nullable=False)                              # e.g. new_note
    sent_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)    # delivery time
    status = Column(String(20), nullable=False, default="sent")                  # delivery status
