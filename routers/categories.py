# routers/categories.py

from typing import List

from fastapi import APIRouter, Depends

from dependencies.auth import require_admin_user
from core.errors import NotFound
from core.logging_config import logger
from core.supabase_helpers import fetch_one, safe_delete, safe_insert, safe_select, safe_update
from models.category import CategoryCreate, CategoryRead, CategoryUpdate
from models.user import Principal

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)


@router.get("", summary="List Categories", response_model=List[CategoryRead])
def list_categories():
    return safe_select("categories", {"is_active": True}, order_by="display_order")


@router.post("", summary="Create Category", response_model=CategoryRead, status_code=201)
def create_category(payload: CategoryCreate, current_user: Principal = Depends(require_admin_user)):
    data = payload.model_dump()
    data["created_by"] = current_user.id

    category = safe_insert("categories", data)
    logger.info(f"Category '{category['slug']}' created by {current_user.id}")
    return category


@router.patch("/{category_id}", summary="Update Category", response_model=CategoryRead)
def update_category(category_id: str, payload: CategoryUpdate, current_user: Principal = Depends(require_admin_user)):
    existing = fetch_one("categories", category_id)
    if not existing:
        raise NotFound("Category")

    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        return existing

    return safe_update("categories", {"id": category_id}, updates) or existing


@router.delete("/{category_id}", summary="Delete Category")
def delete_category(category_id: str, current_user: Principal = Depends(require_admin_user)):
    if not fetch_one("categories", category_id, columns="id"):
        raise NotFound("Category")

    safe_delete("categories", {"id": category_id})
    logger.info(f"Category {category_id} deleted by {current_user.id}")
    return {"success": True}
