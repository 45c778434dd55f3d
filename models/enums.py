from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# USER ROLE
# -----------------------------------------------------
class UserRole(BaseStrEnum):
    """Closed set of roles. Authorization always uses explicit allow-sets."""

    buyer = "buyer"
    seller = "seller"
    agent = "agent"
    admin = "admin"


# -----------------------------------------------------
# PROPERTY
# -----------------------------------------------------
class PropertyType(BaseStrEnum):
    residential = "residential"
    commercial = "commercial"
    land = "land"
    rental = "rental"


class PropertyStatus(BaseStrEnum):
    """Market state of the property itself."""

    available = "available"
    sold = "sold"
    rented = "rented"
    pending = "pending"
    suspended = "suspended"


class ListingStatus(BaseStrEnum):
    """Moderation state of the listing."""

    draft = "draft"
    pending_approval = "pending_approval"
    approved = "approved"
    rejected = "rejected"
    suspended = "suspended"


# -----------------------------------------------------
# PROJECTS
# -----------------------------------------------------
class ProjectStatus(BaseStrEnum):
    draft = "draft"
    active = "active"
    completed = "completed"
    archived = "archived"


class ProjectType(BaseStrEnum):
    bungalow = "bungalow"
    duplex = "duplex"
    terresse = "terresse"
    town_house = "town_house"
    apartment = "apartment"
    high_rising = "high_rising"
    block = "block"
    flat = "flat"


class ScheduleVisibility(BaseStrEnum):
    """When project content becomes public."""

    immediate = "immediate"
    scheduled = "scheduled"
    hidden = "hidden"


class ProjectItemKind(BaseStrEnum):
    """URL segment for project content collections."""

    updates = "updates"
    offers = "offers"
    events = "events"


# -----------------------------------------------------
# PAYMENTS
# -----------------------------------------------------
class PaymentStatus(BaseStrEnum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class PaymentMethod(BaseStrEnum):
    bank_transfer = "bank_transfer"
    card = "card"
    mobile_money = "mobile_money"
    other = "other"
