import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)             # created
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)  # last modified
