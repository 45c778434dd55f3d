# -------------------------
# Enums
# -------------------------
from .enums import (
    UserRole,
    PropertyType,
    PropertyStatus,
    ListingStatus,
    ProjectStatus,
    ProjectType,
    ScheduleVisibility,
    ProjectItemKind,
    PaymentStatus,
    PaymentMethod,
)

# -------------------------
# Users / Profiles
# -------------------------
from .user import (
    Principal,
    ProfileRead,
    ProfileComplete,
    ProfileSelfUpdate,
    AdminUserUpdate,
    UserStatusUpdate,
)

# -------------------------
# Property Models
# -------------------------
from .property import (
    PropertyBase,
    PropertyCreate,
    PropertyRead,
    PropertyUpdate,
    PropertyRejection,
    FavoriteToggleResult,
)

# -------------------------
# Project Models
# -------------------------
from .project import (
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    ProjectDetail,
    VisibilityReplace,
    ProjectUpdateCreate,
    ProjectOfferCreate,
    ProjectEventCreate,
    ProjectUpdateRead,
    ProjectOfferRead,
    ProjectEventRead,
)

# -------------------------
# Messaging
# -------------------------
from .message import (
    MessageCreate,
    ConversationStart,
    MessageRead,
    ConversationRead,
    ConversationThread,
)

# -------------------------
# Payments
# -------------------------
from .payment import (
    PaymentRead,
    PaymentUpdate,
    PaymentStatusUpdate,
)

# -------------------------
# Members / Categories
# -------------------------
from .member import (
    MemberCreate,
    MemberUpdate,
    MemberRead,
)

from .category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryRead,
)
