# backend/tagclaim/schemas/common.py
from datetime import datetime
from typing import Optional, Any
from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorBody
    data: None = None
    timestamp: datetime


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
