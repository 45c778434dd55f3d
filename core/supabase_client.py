# core/supabase_client.py

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Client:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.
    Row-level security is bypassed, so every route must pass
    the authorization gate before touching a table.
    """
    supabase_url = settings.SUPABASE_URL
    supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY

    if not supabase_url or not supabase_key:
        logger.error("Missing Supabase credentials")
        logger.error(f"   URL: {supabase_url}")
        logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
        raise RuntimeError("Supabase client not configured")

    return create_client(supabase_url, supabase_key)


# ============================================================
# Ping Supabase for health checks
# ============================================================

def ping_supabase() -> dict:
    """
    Simple connectivity check.
    Does NOT query auth tables.
    """
    try:
        client = get_supabase_client()
    except RuntimeError:
        return {"service": "Supabase", "status": "not_configured"}

    tables = ["profiles", "properties", "projects", "payments"]
    results = {}

    for t in tables:
        try:
            res = client.table(t).select("id").limit(1).execute()
            results[t] = {
                "status": "ok",
                "rows_found": len(res.data or []),
            }
        except Exception as err:
            logger.warning(f"Supabase ping failed for {t}: {err}")
            results[t] = {"status": "error", "detail": str(err)}

    overall = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
    return {
        "service": "Supabase",
        "status": overall,
        "tables": results,
    }
