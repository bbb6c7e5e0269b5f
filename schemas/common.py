"""
schemas/common.py

- Shared schemas used across the project (Pydantic v2)
- Contents:
  1) error envelope: ErrorDetail, ErrorResponse
  2) pagination: Pagination, MetaInfo, make_meta()
  3) success envelope: SuccessEnvelope[T]
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) Error envelope
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest error unit: code + message"""
    code: str = Field(..., description="Error code (e.g. VALIDATION_ERROR, NOT_FOUND)")
    message: str = Field(..., description="Human readable message")

class ErrorResponse(BaseModel):
    """
    Standard error body returned by the global handlers
    (middlewares/error_handler.py).
    """
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation time (UTC)"
    )
    latency_ms: Optional[int] = Field(
        default=None, ge=0, description="Request processing time in ms"
    )
    trace_id: Optional[str] = Field(
        default=None, description="Request trace id (copied from X-Request-ID)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) Pagination
# =========================================================

class Pagination(BaseModel):
    """
    Paging parameters for list endpoints
    - page: starts at 1
    - size: 1~200
    """
    page: int = Field(1, ge=1, description="Current page (1-based)")
    size: int = Field(20, ge=1, le=200, description="Items per page")

    model_config = ConfigDict(extra="ignore")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


class MetaInfo(BaseModel):
    """
    Meta block attached to list responses
    - total: total rows
    - page/size: current page and size
    - pages: page count
    """
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    size: int = Field(..., ge=1)
    pages: int = Field(..., ge=1)

    model_config = ConfigDict(extra="ignore")


def make_meta(total: int, page: int, size: int) -> MetaInfo:
    """
    Build paging meta
    - pages is at least 1 even when total is 0
    """
    pages = max(1, ceil(total / max(1, size)))
    return MetaInfo(total=total, page=page, size=size, pages=pages)


# =========================================================
# 3) Success envelope
# =========================================================

T = TypeVar("T")

class SuccessEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T
    meta: Optional[MetaInfo] = None
    message: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
