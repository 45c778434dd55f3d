# routers/properties.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from dependencies.auth import (
    get_current_user,
    get_optional_user,
    requires_role,
)
from core.authz import check_ownership, ensure_owner
from core.config import settings
from core.errors import NotFound, handle_supabase_error
from core.logging_config import logger
from core.roles import LISTING_ROLES
from core.supabase_client import get_supabase_client
from core.supabase_helpers import fetch_one, safe_delete, safe_insert, safe_select, safe_update
from core.utils import within_radius
from models.enums import ListingStatus, PropertyStatus, PropertyType
from models.property import (
    FavoriteToggleResult,
    PropertyCreate,
    PropertyRead,
    PropertyUpdate,
)
from models.user import Principal


router = APIRouter(
    prefix="/properties",
    tags=["Properties"],
)


def _escape_like(term: str) -> str:
    # PostgREST or_() uses commas and parentheses as separators
    return "".join(ch for ch in term if ch not in ",()").strip()


# -----------------------------------------------------
# PUBLIC SEARCH
# -----------------------------------------------------
@router.get("", summary="Search Listings", response_model=List[PropertyRead])
def list_properties(
    type: Optional[PropertyType] = None,
    city: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, description="Kilometres"),
):
    """
    Approved, available listings only. Radius filtering runs in memory
    over the fetched rows (no spatial index).
    """
    client = get_supabase_client()

    query = (
        client.table("properties")
        .select("*")
        .eq("listing_status", ListingStatus.approved.value)
        .eq("status", PropertyStatus.available.value)
    )

    if type:
        query = query.eq("property_type", type.value)
    if city:
        query = query.eq("city", city)
    if min_price is not None:
        query = query.gte("price", min_price)
    if max_price is not None:
        query = query.lte("price", max_price)
    if bedrooms is not None:
        query = query.eq("bedrooms", bedrooms)
    if bathrooms is not None:
        query = query.eq("bathrooms", bathrooms)
    if search and _escape_like(search):
        term = _escape_like(search)
        query = query.or_(
            f"title.ilike.%{term}%,description.ilike.%{term}%,address.ilike.%{term}%"
        )

    try:
        result = (
            query.order("created_at", desc=True)
            .limit(settings.PROPERTY_LIST_LIMIT)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Failed to search properties")

    rows = result.data or []

    if lat is not None and lng is not None and radius is not None:
        rows = [row for row in rows if within_radius(row, lat, lng, radius)]

    return rows


# -----------------------------------------------------
# MY LISTINGS (seller / agent dashboards)
# -----------------------------------------------------
@router.get("/mine", summary="My Listings", response_model=List[PropertyRead])
def list_my_properties(current_user: Principal = Depends(requires_role(LISTING_ROLES))):
    return safe_select(
        "properties",
        {"seller_id": current_user.id},
        order_by="created_at",
        desc=True,
    )


# -----------------------------------------------------
# GET ONE
# -----------------------------------------------------
@router.get("/{property_id}", summary="Get Listing", response_model=PropertyRead)
def get_property(property_id: str, current_user: Optional[Principal] = Depends(get_optional_user)):
    prop = fetch_one("properties", property_id)
    if not prop:
        raise NotFound("Property")

    if prop.get("listing_status") != ListingStatus.approved.value:
        # Unapproved listings are only visible to their seller and admins
        if current_user is None or not check_ownership(current_user, prop.get("seller_id")):
            raise NotFound("Property")

    return prop


# -----------------------------------------------------
# CREATE
# -----------------------------------------------------
@router.post("", summary="Create Listing", response_model=PropertyRead, status_code=201)
def create_property(payload: PropertyCreate, current_user: Principal = Depends(requires_role(LISTING_ROLES))):
    data = payload.model_dump(mode="json", exclude_none=True)
    data["seller_id"] = current_user.id
    data["status"] = PropertyStatus.available.value

    if current_user.is_admin:
        data["listing_status"] = ListingStatus.approved.value
        data["approved_at"] = datetime.now(timezone.utc).isoformat()
        data["approved_by"] = current_user.id
    else:
        data["listing_status"] = ListingStatus.pending_approval.value

    prop = safe_insert("properties", data)
    logger.info(f"Property {prop['id']} created by {current_user.id} ({data['listing_status']})")
    return prop


# -----------------------------------------------------
# UPDATE / DELETE (owner or admin)
# -----------------------------------------------------
@router.patch("/{property_id}", summary="Update Listing", response_model=PropertyRead)
def update_property(
    property_id: str,
    payload: PropertyUpdate,
    current_user: Principal = Depends(get_current_user),
):
    ensure_owner(
        current_user,
        fetch_one("properties", property_id, columns="id, seller_id"),
        "seller_id",
        "Property",
    )

    updates = payload.model_dump(mode="json", exclude_unset=True)
    if not updates:
        return fetch_one("properties", property_id)

    prop = safe_update("properties", {"id": property_id}, updates)
    if not prop:
        raise NotFound("Property")

    logger.info(f"Property {property_id} updated by {current_user.id}")
    return prop


@router.delete("/{property_id}", summary="Delete Listing")
def delete_property(property_id: str, current_user: Principal = Depends(get_current_user)):
    ensure_owner(
        current_user,
        fetch_one("properties", property_id, columns="id, seller_id"),
        "seller_id",
        "Property",
    )

    safe_delete("properties", {"id": property_id})
    logger.info(f"Property {property_id} deleted by {current_user.id}")
    return {"success": True}


# -----------------------------------------------------
# FAVORITES
# -----------------------------------------------------
@router.post("/{property_id}/favorite", summary="Toggle Favorite", response_model=FavoriteToggleResult)
def toggle_favorite(property_id: str, current_user: Principal = Depends(get_current_user)):
    if not fetch_one("properties", property_id, columns="id"):
        raise NotFound("Property")

    existing = safe_select(
        "property_favorites",
        {"user_id": current_user.id, "property_id": property_id},
        columns="id",
        limit=1,
    )

    if existing:
        safe_delete("property_favorites", {"id": existing[0]["id"]})
        return FavoriteToggleResult(property_id=property_id, is_favorite=False)

    safe_insert("property_favorites", {"user_id": current_user.id, "property_id": property_id})
    return FavoriteToggleResult(property_id=property_id, is_favorite=True)


favorites_router = APIRouter(
    prefix="/favorites",
    tags=["Favorites"],
)


@favorites_router.get("", summary="My Favorites", response_model=List[PropertyRead])
def list_favorites(current_user: Principal = Depends(get_current_user)):
    favorites = safe_select("property_favorites", {"user_id": current_user.id}, columns="property_id")
    property_ids = [f["property_id"] for f in favorites]
    if not property_ids:
        return []

    client = get_supabase_client()
    try:
        result = client.table("properties").select("*").in_("id", property_ids).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load favorites")

    return result.data or []
