# core/supabase_helpers.py

from typing import Optional

from core.utils import sanitize
from core.errors import handle_supabase_error
from core.supabase_client import get_supabase_client


# =================================================================
#  SAFE SELECT / INSERT / UPDATE / DELETE
# =================================================================
# Thin wrappers over the PostgREST query builder. Every failure is
# converted by handle_supabase_error so routes never leak raw
# PostgREST messages.
#
# Single-row lookups use limit(1) instead of .single() so a miss is
# an empty list (→ None) rather than a PostgREST exception.
# =================================================================

def safe_select(
    table: str,
    filters: dict = None,
    *,
    columns: str = "*",
    order_by: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
) -> list:
    """SELECT rows matching all equality filters."""
    client = get_supabase_client()

    try:
        query = client.table(table).select(columns)
        for key, val in (filters or {}).items():
            query = query.eq(key, val)
        if order_by:
            query = query.order(order_by, desc=desc)
        if limit:
            query = query.limit(limit)

        result = query.execute()
        return result.data or []

    except Exception as e:
        raise handle_supabase_error(e, f"Failed to fetch from {table}")


def fetch_one(table: str, row_id: str, *, columns: str = "*") -> Optional[dict]:
    """Fetch a row by primary key; None when it does not exist."""
    client = get_supabase_client()

    try:
        result = (
            client.table(table)
            .select(columns)
            .eq("id", row_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to fetch from {table}")

    return result.data[0] if result.data else None


def safe_insert(table: str, data: dict) -> dict:
    """INSERT one row and return its representation."""
    client = get_supabase_client()
    cleaned = sanitize(data)

    try:
        result = (
            client.table(table)
            .insert(cleaned, returning="representation")
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to insert into {table}")

    if not result.data:
        raise handle_supabase_error(RuntimeError("empty insert result"), f"Failed to insert into {table}")
    return result.data[0]


def safe_update(table: str, filters: dict, data: dict) -> Optional[dict]:
    """UPDATE rows matching filters; returns the first updated row."""
    client = get_supabase_client()
    cleaned = sanitize(data)

    try:
        query = client.table(table).update(cleaned, returning="representation")
        for key, val in filters.items():
            query = query.eq(key, val)

        result = query.execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to update {table}")

    return result.data[0] if result.data else None


def safe_delete(table: str, filters: dict) -> None:
    """DELETE rows matching filters. Cascades are the database's job."""
    client = get_supabase_client()

    try:
        query = client.table(table).delete()
        for key, val in filters.items():
            query = query.eq(key, val)
        query.execute()
    except Exception as e:
        raise handle_supabase_error(e, f"Failed to delete from {table}")
