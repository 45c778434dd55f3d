# models/category.py

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CategoryBase(BaseModel):
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None
    display_order: int = 0
    is_active: bool = True

    @field_validator("slug")
    def validate_slug(cls, v):
        v = v.strip().lower()
        if not SLUG_RE.match(v):
            raise ValueError("slug must be lowercase words separated by hyphens")
        return v


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("slug")
    def validate_slug(cls, v):
        if v is None:
            return v
        v = v.strip().lower()
        if not SLUG_RE.match(v):
            raise ValueError("slug must be lowercase words separated by hyphens")
        return v


class CategoryRead(CategoryBase):
    """Model for categories from the categories table."""
    id: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
