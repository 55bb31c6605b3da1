"""Response envelope shared by every endpoint"""
from typing import List, Optional
from pydantic import BaseModel, Field


class Pagination(BaseModel):
    page: int
    limit: int
    pages: int


class Envelope(BaseModel):
    """{success, data?, message?}"""
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: List[str] = Field(default_factory=list)
