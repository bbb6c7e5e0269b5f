import logging
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from models.activity_logs import ActivityLog

logger = logging.getLogger(__name__)


def record_activity(
    db: Session,
    user_id: Optional[str],
    action: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> ActivityLog:
    """Add an audit row to the session; the caller commits."""
    entry = ActivityLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
        ip_address=request.client.host if request is not None and request.client else None,
        user_agent=(request.headers.get("user-agent") or "")[:300] if request is not None else None,
    )
    db.add(entry)
    logger.debug("activity %s %s/%s by %s", action, resource_type, resource_id, user_id)
    return entry
