from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


# -------------------------------------------------
# Team members shown on the public "members" page
# -------------------------------------------------
class MemberBase(BaseModel):
    name: str
    role: str = Field(..., description="Job title shown on the card")
    image_url: Optional[str] = None
    details: str
    display_order: int = 0
    is_active: bool = True


class MemberCreate(MemberBase):
    pass


class MemberUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    image_url: Optional[str] = None
    details: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class MemberRead(MemberBase):
    id: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
