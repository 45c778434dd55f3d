# routers/members.py

from typing import List

from fastapi import APIRouter, Depends

from dependencies.auth import require_admin_user
from core.errors import NotFound
from core.logging_config import logger
from core.supabase_helpers import fetch_one, safe_delete, safe_insert, safe_select, safe_update
from models.member import MemberCreate, MemberRead, MemberUpdate
from models.user import Principal

router = APIRouter(
    prefix="/members",
    tags=["Members"],
)


@router.get("", summary="Team Members", response_model=List[MemberRead])
def list_members():
    """Public page: active members in display order."""
    return safe_select("members", {"is_active": True}, order_by="display_order")


@router.get("/all", summary="All Members (admin)", response_model=List[MemberRead])
def list_all_members(current_user: Principal = Depends(require_admin_user)):
    return safe_select("members", order_by="display_order")


@router.post("", summary="Create Member", response_model=MemberRead, status_code=201)
def create_member(payload: MemberCreate, current_user: Principal = Depends(require_admin_user)):
    data = payload.model_dump()
    data["created_by"] = current_user.id

    member = safe_insert("members", data)
    logger.info(f"Member {member['id']} created by {current_user.id}")
    return member


@router.patch("/{member_id}", summary="Update Member", response_model=MemberRead)
def update_member(member_id: str, payload: MemberUpdate, current_user: Principal = Depends(require_admin_user)):
    existing = fetch_one("members", member_id)
    if not existing:
        raise NotFound("Member")

    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return existing

    return safe_update("members", {"id": member_id}, updates) or existing


@router.delete("/{member_id}", summary="Delete Member")
def delete_member(member_id: str, current_user: Principal = Depends(require_admin_user)):
    if not fetch_one("members", member_id, columns="id"):
        raise NotFound("Member")

    safe_delete("members", {"id": member_id})
    logger.info(f"Member {member_id} deleted by {current_user.id}")
    return {"success": True}
