# core/errors.py

from fastapi import HTTPException, status


# ============================================================
# Authorization error kinds
# ============================================================
# Three distinct kinds, never collapsed into one another:
#   Unauthenticated → "please sign in"      (401)
#   Forbidden       → "not allowed"         (403)
#   NotFound        → "<Resource> not found" (404, checked before Forbidden)
# ============================================================

class Unauthenticated(HTTPException):
    def __init__(self, detail: str = "Please sign in to continue"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ProfileRequired(Unauthenticated):
    """Signed in with Supabase Auth, but no row in `profiles` yet."""

    def __init__(self):
        super().__init__(detail="Please complete your profile to continue")


class Forbidden(HTTPException):
    def __init__(self, detail: str = "You are not allowed to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


# ============================================================
# Supabase error helpers
# ============================================================

def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST API errors
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to create property")
        status_code: HTTP status code (default 500)

    Returns:
        HTTPException with standardized error message
    """
    from core.logging_config import logger

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
