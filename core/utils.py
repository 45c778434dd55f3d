# core/utils.py

import json
import math
from datetime import datetime, timezone
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data before it is written to Supabase:
    - Empty strings → None
    - Strip string whitespace
    - Everything else kept as-is
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped if stripped else None
            continue

        clean[k] = v

    return clean


def parse_media_urls(value) -> list:
    """
    Normalize a media_urls payload into a list of non-empty URL strings.

    Accepts a list, a JSON-encoded list (multipart forms send it that
    way), or nothing. Anything unparseable becomes an empty list.
    """
    if value is None:
        return []

    if isinstance(value, str):
        raw = value.strip()
        if raw in ("", "null"):
            return []
        try:
            value = json.loads(raw)
        except ValueError:
            return []

    if not isinstance(value, list):
        return []

    return [str(item).strip() for item in value if item and str(item).strip()]


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points, in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def within_radius(row: dict, lat: float, lng: float, radius_km: float) -> bool:
    """Rows without coordinates never match a radius search."""
    row_lat: Optional[float] = row.get("latitude")
    row_lng: Optional[float] = row.get("longitude")
    if row_lat is None or row_lng is None:
        return False
    return haversine_km(lat, lng, float(row_lat), float(row_lng)) <= radius_km


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps; aware ones pass through."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
