"""
schemas/common.py

- Shared schemas used across the project (Pydantic v2)
- Contents:
  1) Error envelope: ErrorDetail, ErrorResponse
  2) Paging: MetaInfo, make_meta(), paginate()
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) Error envelope
# =========================================================

class ErrorDetail(BaseModel):
    """Stable error code plus a human readable message"""
    code: str = Field(..., description="Error code (VALIDATION_ERROR, UNAUTHORIZED, NOT_FOUND, INTERNAL_ERROR)")
    message: str = Field(..., description="Human readable message")
    details: Optional[Any] = None

class ErrorResponse(BaseModel):
    """
    Body returned by the global error handlers (middlewares/error_handler.py)
    """
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) Paging
# =========================================================

class MetaInfo(BaseModel):
    """
    Paging metadata attached to list responses
    - start/end: 1-based positions shown ("Showing 1 - 15 of 40")
    """
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    size: int = Field(..., ge=1)
    pages: int = Field(..., ge=1)
    start: int = Field(0, ge=0)
    end: int = Field(0, ge=0)

    model_config = ConfigDict(extra="ignore")


def make_meta(total: int, page: int, size: int) -> MetaInfo:
    """
    pages is at least 1 even when total is 0, so the UI can always render "page 1 of 1"
    """
    pages = max(1, ceil(total / max(1, size)))
    offset = (page - 1) * size
    if offset >= total:
        # empty page (no rows, or past the last page)
        return MetaInfo(total=total, page=page, size=size, pages=pages, start=0, end=0)
    start = offset + 1
    end = min(page * size, total)
    return MetaInfo(total=total, page=page, size=size, pages=pages, start=start, end=end)


T = TypeVar("T")


def paginate(items: Sequence[T], page: int, size: int) -> Tuple[List[T], MetaInfo]:
    """Slice one page out of an already filtered list"""
    meta = make_meta(len(items), page, size)
    offset = (page - 1) * size
    return list(items[offset:offset + size]), meta
