from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from dependencies.auth import (
    AuthIdentity,
    get_auth_identity,
    get_current_user,
)
from core.errors import NotFound, handle_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.supabase_helpers import fetch_one, safe_update
from models.user import Principal, ProfileComplete, ProfileRead, ProfileSelfUpdate


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", response_model=ProfileRead, summary="Current authenticated user")
def read_me(current_user: Principal = Depends(get_current_user)):
    profile = fetch_one("profiles", current_user.id)
    if not profile:
        raise NotFound("Profile")
    return profile


@router.patch("/me", response_model=ProfileRead, summary="Update current user profile")
def update_profile(
    payload: ProfileSelfUpdate,
    current_user: Principal = Depends(get_current_user),
):
    """
    Self-service profile edit.

    Role and the verified/active flags are not part of the payload;
    only admins change those (see /admin/users).
    """
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return fetch_one("profiles", current_user.id)

    updates["updated_at"] = datetime.now(timezone.utc).isoformat()
    profile = safe_update("profiles", {"id": current_user.id}, updates)
    if not profile:
        raise NotFound("Profile")

    logger.info(f"User {current_user.id} updated their profile")
    return profile


# ============================================================
# COMPLETE PROFILE (first sign-in)
# ============================================================
@router.post("/complete-profile", response_model=ProfileRead, summary="Create or finish the caller's profile")
def complete_profile(
    payload: ProfileComplete,
    identity: AuthIdentity = Depends(get_auth_identity),
):
    """
    Called once after Supabase sign-up. Upserts the `profiles` row
    keyed by the auth user id with the self-selected role.
    """
    client = get_supabase_client()

    existing = fetch_one("profiles", identity.id, columns="id, role")
    role = payload.role.value
    if existing and existing.get("role"):
        # Only the first completion picks the role; later changes go through /admin/users
        role = existing["role"]

    row = {
        "id": identity.id,
        "email": identity.email,
        "full_name": payload.full_name,
        "phone": payload.phone,
        "role": role,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }

    try:
        result = client.table("profiles").upsert(row, on_conflict="id").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to save profile")

    logger.info(f"Profile completed for {identity.id} as {role}")
    return result.data[0] if result.data else row
