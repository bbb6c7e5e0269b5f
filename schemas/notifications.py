from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class NotificationSendRequest(BaseModel):
    note_id: Optional[str] = Field(default=None, alias="noteId")

    model_config = ConfigDict(populate_by_name=True)


class EmailTemplate(BaseModel):
    """Rendered email in its three parts."""
    subject: str
    html: str
    text: str


class EmailNotificationOut(BaseModel):
    id: str
    user_id: str
    note_id: str
    email_type: str
    sent_at: datetime
    status: str

    model_config = ConfigDict(from_attributes=True)
