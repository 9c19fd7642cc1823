from salon.models.user import User, UserCreate, UserPublic, UserUpdate
from salon.models.refresh_token import RefreshToken
from salon.models.service import Service, ServiceCreate, ServicePublic, ServiceUpdate
from salon.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from salon.models.blocked_slot import BlockedSlot, BlockedSlotCreate, BlockedSlotPublic
from salon.models.announcement import (
    Announcement,
    AnnouncementCreate,
    AnnouncementPublic,
    AnnouncementUpdate,
)

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "UserUpdate",
    "RefreshToken",
    "Service",
    "ServiceCreate",
    "ServicePublic",
    "ServiceUpdate",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "BlockedSlot",
    "BlockedSlotCreate",
    "BlockedSlotPublic",
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementPublic",
    "AnnouncementUpdate",
]
