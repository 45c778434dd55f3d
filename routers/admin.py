# routers/admin.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from dependencies.auth import require_admin_user
from core.errors import NotFound, handle_supabase_error
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.supabase_helpers import fetch_one, safe_delete, safe_select, safe_update
from models.enums import ListingStatus, UserRole
from models.property import PropertyRead, PropertyRejection
from models.user import AdminUserUpdate, Principal, ProfileRead, UserStatusUpdate


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


def _load_profile(user_id: str) -> dict:
    profile = fetch_one("profiles", user_id)
    if not profile:
        raise NotFound("User")
    return profile


# -----------------------------------------------------
# USERS
# -----------------------------------------------------
@router.get("/users", summary="List Users", response_model=List[ProfileRead])
def list_users(
    role: Optional[UserRole] = None,
    current_user: Principal = Depends(require_admin_user),
):
    filters = {"role": role.value} if role else None
    return safe_select("profiles", filters, order_by="created_at", desc=True)


@router.patch("/users/{user_id}", summary="Update User", response_model=ProfileRead)
def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    current_user: Principal = Depends(require_admin_user),
):
    profile = _load_profile(user_id)

    updates = payload.model_dump(mode="json", exclude_unset=True)
    if not updates:
        return profile

    if user_id == current_user.id and updates.get("role", UserRole.admin.value) != UserRole.admin.value:
        raise HTTPException(400, "You cannot remove your own admin role")

    updates["updated_at"] = datetime.now(timezone.utc).isoformat()
    updated = safe_update("profiles", {"id": user_id}, updates) or profile

    logger.info(f"Admin {current_user.id} updated user {user_id}: {sorted(updates)}")
    return updated


@router.put("/users/{user_id}/status", summary="Activate / Deactivate User", response_model=ProfileRead)
def set_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    current_user: Principal = Depends(require_admin_user),
):
    profile = _load_profile(user_id)

    if user_id == current_user.id and not payload.is_active:
        raise HTTPException(400, "You cannot deactivate your own account")

    updated = safe_update(
        "profiles",
        {"id": user_id},
        {"is_active": payload.is_active, "updated_at": datetime.now(timezone.utc).isoformat()},
    ) or profile

    logger.info(f"Admin {current_user.id} set user {user_id} is_active={payload.is_active}")
    return updated


@router.delete("/users/{user_id}", summary="Delete User")
def delete_user(user_id: str, current_user: Principal = Depends(require_admin_user)):
    """
    Removes the profile row, then the Supabase Auth account.
    Owned rows are cleaned up by the database's cascades.
    """
    _load_profile(user_id)

    if user_id == current_user.id:
        raise HTTPException(400, "You cannot delete your own account")

    safe_delete("profiles", {"id": user_id})

    client = get_supabase_client()
    try:
        client.auth.admin.delete_user(user_id)
    except Exception as e:
        raise handle_supabase_error(e, "Profile removed but failed to delete auth account")

    logger.info(f"Admin {current_user.id} deleted user {user_id}")
    return {"success": True, "deleted_user_id": user_id}


# -----------------------------------------------------
# LISTING APPROVAL
# -----------------------------------------------------
@router.get("/properties/pending", summary="Listings Awaiting Approval", response_model=List[PropertyRead])
def list_pending_properties(current_user: Principal = Depends(require_admin_user)):
    return safe_select(
        "properties",
        {"listing_status": ListingStatus.pending_approval.value},
        order_by="created_at",
    )


def _review_property(property_id: str, reviewer: Principal, approved: bool, reason: Optional[str] = None) -> dict:
    if not fetch_one("properties", property_id, columns="id"):
        raise NotFound("Property")

    now = datetime.now(timezone.utc).isoformat()
    updates = {
        "listing_status": (ListingStatus.approved if approved else ListingStatus.rejected).value,
        "approved_by": reviewer.id,
        "approved_at": now if approved else None,
        "rejection_reason": None if approved else reason,
    }

    prop = safe_update("properties", {"id": property_id}, updates)
    if not prop:
        raise NotFound("Property")

    logger.info(f"Property {property_id} {updates['listing_status']} by {reviewer.id}")
    return prop


@router.post("/properties/{property_id}/approve", summary="Approve Listing", response_model=PropertyRead)
def approve_property(property_id: str, current_user: Principal = Depends(require_admin_user)):
    return _review_property(property_id, current_user, approved=True)


@router.post("/properties/{property_id}/reject", summary="Reject Listing", response_model=PropertyRead)
def reject_property(
    property_id: str,
    payload: PropertyRejection,
    current_user: Principal = Depends(require_admin_user),
):
    return _review_property(property_id, current_user, approved=False, reason=payload.reason)
