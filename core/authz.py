# core/authz.py

from typing import Callable, Iterable, Optional

from core.errors import Forbidden, NotFound, Unauthenticated
from core.logging_config import logger
from models.enums import UserRole
from models.user import Principal


# Returns the caller's principal, or None when there is no valid session.
SessionResolver = Callable[[], Optional[Principal]]


# ============================================================
# OWNERSHIP (pure)
# ============================================================
def check_ownership(principal: Principal, resource_owner_id: Optional[str]) -> bool:
    """True iff the caller is an admin or owns the resource."""
    if principal.role == UserRole.admin:
        return True
    return resource_owner_id is not None and principal.id == str(resource_owner_id)


def ensure_owner(
    principal: Principal,
    row: Optional[dict],
    owner_field: str,
    resource: str,
) -> dict:
    """
    Guard for every mutation on an owned row.

    A missing row is reported as NotFound before ownership is looked at,
    so "not found" and "not yours" never leak through different paths
    for rows that do not exist.
    """
    if not row:
        raise NotFound(resource)

    if not check_ownership(principal, row.get(owner_field)):
        logger.info(
            f"Ownership denied: user={principal.id} role={principal.role} "
            f"{resource.lower()}={row.get('id')}"
        )
        raise Forbidden(f"You do not own this {resource.lower()}")

    return row


# ============================================================
# AUTHORIZATION GATE
# ============================================================
class AuthorizationGate:
    """
    Answers "who is calling, and may they do X".

    The session is resolved through the injected resolver on every call;
    nothing is cached, so a role change is honoured on the next request.
    """

    def __init__(self, resolve_session: SessionResolver):
        self._resolve_session = resolve_session

    def require_auth(self) -> Principal:
        principal = self._resolve_session()
        if principal is None:
            raise Unauthenticated()
        return principal

    def require_role(self, allowed_roles: Iterable[UserRole]) -> Principal:
        allowed = frozenset(UserRole(r) for r in allowed_roles)
        if not allowed:
            raise ValueError("require_role needs an explicit, non-empty allow-set")

        principal = self.require_auth()
        if principal.role not in allowed:
            raise Forbidden(
                f"Requires one of: {sorted(r.value for r in allowed)}"
            )
        return principal

    def require_admin(self) -> Principal:
        return self.require_role({UserRole.admin})

    def optional_principal(self) -> Optional[Principal]:
        """For public pages that render differently for signed-in users."""
        try:
            return self.require_auth()
        except Unauthenticated:
            return None
