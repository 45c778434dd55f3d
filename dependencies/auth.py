from datetime import datetime, timezone
from typing import Iterable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.authz import AuthorizationGate, SessionResolver
from core.errors import ProfileRequired, Unauthenticated
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.enums import UserRole
from models.user import Principal


bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# Supabase Auth identity (before a profile exists)
# ============================================================
class AuthIdentity(BaseModel):
    id: str
    email: str


def verify_access_token(token: Optional[str]) -> Optional[AuthIdentity]:
    """Validate a Supabase access token with GoTrue. None when invalid."""
    if not token:
        return None

    client: Client = get_supabase_client()

    try:
        auth_resp = client.auth.get_user(token)
    except Exception as e:
        logger.debug(f"Token rejected by Supabase Auth: {e}")
        return None

    if not auth_resp or not auth_resp.user or not auth_resp.user.email:
        return None

    return AuthIdentity(id=auth_resp.user.id, email=auth_resp.user.email)


def load_principal(identity: AuthIdentity) -> Principal:
    """
    Join the auth identity with its `profiles` row.
    A failing lookup propagates; a missing row means the user
    still has to complete their profile.
    """
    client: Client = get_supabase_client()
    result = (
        client.table("profiles")
        .select("id, email, role, is_active, is_verified, full_name")
        .eq("id", identity.id)
        .limit(1)
        .execute()
    )

    if not result.data:
        raise ProfileRequired()

    profile = result.data[0]
    return Principal(
        id=identity.id,
        email=profile.get("email") or identity.email,
        role=profile["role"],
        is_active=profile.get("is_active", True),
        is_verified=profile.get("is_verified", False),
        full_name=profile.get("full_name"),
    )


# ============================================================
# Per-request session resolver → AuthorizationGate
# ============================================================
def get_session_resolver(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionResolver:
    token = credentials.credentials if credentials else None

    def resolve() -> Optional[Principal]:
        identity = verify_access_token(token)
        if identity is None:
            return None
        return load_principal(identity)

    return resolve


def get_gate(resolver: SessionResolver = Depends(get_session_resolver)) -> AuthorizationGate:
    return AuthorizationGate(resolver)


def get_auth_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthIdentity:
    """Identity only; used by profile completion, where no profile exists yet."""
    identity = verify_access_token(credentials.credentials if credentials else None)
    if identity is None:
        raise Unauthenticated()
    return identity


# ============================================================
# Route-level guards
# ============================================================
def get_current_user(gate: AuthorizationGate = Depends(get_gate)) -> Principal:
    return gate.require_auth()


def get_optional_user(gate: AuthorizationGate = Depends(get_gate)) -> Optional[Principal]:
    return gate.optional_principal()


def requires_role(allowed_roles: Iterable[UserRole]):
    """
    Usage:
        current_user: Principal = Depends(requires_role(LISTING_ROLES))
    """
    allowed = frozenset(allowed_roles)

    def checker(gate: AuthorizationGate = Depends(get_gate)) -> Principal:
        return gate.require_role(allowed)

    return checker


def require_admin_user(gate: AuthorizationGate = Depends(get_gate)) -> Principal:
    return gate.require_admin()


# ============================================================
# Clock
# ============================================================
def get_now() -> datetime:
    """Evaluation instant for visibility checks (overridden in tests)."""
    return datetime.now(timezone.utc)
