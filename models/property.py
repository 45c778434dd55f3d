from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .enums import PropertyType, PropertyStatus, ListingStatus


# -------------------------------------------------
# Shared Fields
# -------------------------------------------------
class PropertyBase(BaseModel):
    title: str
    description: Optional[str] = None
    property_type: PropertyType
    category_id: Optional[str] = None

    address: str
    city: str
    district: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    price: float = Field(..., ge=0)
    currency: Optional[str] = None
    size_sqm: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    parking_spaces: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None


# -------------------------------------------------
# Create Property
# -------------------------------------------------
class PropertyCreate(PropertyBase):
    """
    Backend sets seller_id, status and listing_status.
    Admin listings are approved on creation; everyone else
    waits in pending_approval.
    """
    pass


# -------------------------------------------------
# Update Property (partial, owner or admin)
# -------------------------------------------------
class PropertyUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    property_type: Optional[PropertyType] = None
    category_id: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    size_sqm: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    parking_spaces: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    status: Optional[PropertyStatus] = None


# -------------------------------------------------
# Read Property
# -------------------------------------------------
class PropertyRead(PropertyBase):
    id: str
    seller_id: str
    agent_id: Optional[str] = None
    status: PropertyStatus = PropertyStatus.available
    listing_status: ListingStatus = ListingStatus.pending_approval
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    views_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyRejection(BaseModel):
    reason: Optional[str] = None


class FavoriteToggleResult(BaseModel):
    property_id: str
    is_favorite: bool
