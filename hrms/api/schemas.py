"""Response schemas for the HRMS API."""

from typing import Any, List, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every denied or failed request."""
    success: bool = False
    message: str


class SuccessResponse(BaseModel):
    success: bool = True
    data: Optional[Any] = None


class AccessSummary(BaseModel):
    """What the caller may reach, used by the frontend to build navigation."""
    user_id: str
    company_id: Optional[str] = None
    role: str
    modules: List[str]
    read_only: bool
    global_setup: bool
