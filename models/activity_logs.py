from sqlalchemy import Column, String, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.common import new_id, utcnow
from models.users import User


class ActivityLog(Base):
    __tablename__ = "activity_logs"  # audit trail shown on the admin dashboard

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"))               # actor (nullable for anonymous)
    action = Column(String(100), nullable=False)                       # e.g. note.created
    resource_type = Column(String(50))                                 # e.g. daily_note
    resource_id = Column(String(36))                                   # affected row
    details = Column(JSON)                                             # free-form payload
    ip_address = Column(String(45))
    user_agent = Column(String(300))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship(User)
