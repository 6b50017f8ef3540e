"""Contact schedule enums."""

from enum import Enum


class ContactFrequency(str, Enum):
    """How often contact recurs."""

    DAILY = "daily"
    TWICE_WEEKLY = "twice_weekly"
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class ContactType(str, Enum):
    FACE_TO_FACE = "face_to_face"
    TELEPHONE = "telephone"
    VIDEO_CALL = "video_call"
    LETTER = "letter"
    EMAIL = "email"
    OVERNIGHT_STAY = "overnight_stay"


class SupervisionLevel(str, Enum):
    NONE = "none"
    LIGHT_TOUCH = "light_touch"
    FULL = "full"
    PROFESSIONAL = "professional"  # Supervised by a social worker


class ContactScheduleStatus(str, Enum):
    """
    Contact schedule lifecycle status.

    Flow: active ⇄ suspended
              ↘ ended (terminal)
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ENDED = "ended"


DEFAULT_CONTACT_SCHEDULE_STATUS = ContactScheduleStatus.ACTIVE
