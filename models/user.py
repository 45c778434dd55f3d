# models/user.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator

from .enums import UserRole


# ===============================================================
# PRINCIPAL (resolved caller identity)
# ===============================================================

class Principal(BaseModel):
    """
    The authenticated caller: Supabase Auth user id + `profiles` row.

    `is_active` is carried for display only; the authorization gate
    does not consult it.
    """
    id: str
    email: str
    role: UserRole
    is_active: bool = True
    is_verified: bool = False
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


# ===============================================================
# PROFILE MODELS (public.profiles)
# ===============================================================

class ProfileRead(BaseModel):
    id: str
    email: str
    role: UserRole
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    company_name: Optional[str] = None
    license_number: Optional[str] = None
    is_verified: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileComplete(BaseModel):
    """
    Sent once after sign-up. The role is self-selected;
    admin is assigned by the backend only.
    """
    full_name: str
    phone: Optional[str] = None
    role: UserRole = UserRole.buyer

    @field_validator("full_name")
    def full_name_not_blank(cls, v):
        if not v.strip():
            raise ValueError("full_name is required")
        return v.strip()

    @field_validator("role")
    def role_not_admin(cls, v):
        if v == UserRole.admin:
            raise ValueError("The admin role cannot be self-assigned")
        return v


class ProfileSelfUpdate(BaseModel):
    """Fields a user may change on their own profile (never role or flags)."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    company_name: Optional[str] = None
    license_number: Optional[str] = None


class AdminUserUpdate(ProfileSelfUpdate):
    """Admin-side edit: may also change role and flags."""
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_verified: Optional[bool] = None
    is_active: Optional[bool] = None


class UserStatusUpdate(BaseModel):
    is_active: bool
