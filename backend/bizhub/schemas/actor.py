"""Authenticated actor forwarded by the auth gateway"""
from typing import Optional
from pydantic import BaseModel, Field

from bizhub.core.enums import Role


class Actor(BaseModel):
    id: int = Field(..., description="User id")
    company_id: Optional[int] = Field(None, description="Tenant id; None for users without a company")
    role: Role = Field(..., description="owner/admin/accountant/salesman")
    name: Optional[str] = None
