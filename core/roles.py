# ============================================
# EXPLICIT ROLE ALLOW-SETS
# ============================================
# Every guarded route names the exact roles it admits.
# There is no hierarchy and no "everyone except" check:
# a role added to UserRole later is admitted nowhere
# until it is listed here.
# ============================================
from models.enums import UserRole


ADMIN_ONLY = frozenset({UserRole.admin})

# Listing owners: create properties, upload listing media
LISTING_ROLES = frozenset({
    UserRole.seller,
    UserRole.agent,
    UserRole.admin,
})

# Project content authors, per collection
PROJECT_UPDATE_ROLES = ADMIN_ONLY
PROJECT_OFFER_ROLES = ADMIN_ONLY
PROJECT_EVENT_ROLES = frozenset({
    UserRole.seller,
    UserRole.agent,
    UserRole.admin,
})
