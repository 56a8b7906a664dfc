"""
Shared response envelopes.
"""

from typing import Any, Optional
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Generic success response."""

    success: bool = True
    message: str = "OK"
    data: Optional[Any] = None


class ErrorResponse(BaseModel):

    success: bool = False
    code: str
    message: str


class BatchResultResponse(BaseModel):
    """Counts reported by a batch job."""

    processed: int
    created: int
    updated: int
    skipped: int
    failed: int
    errors: list = []
