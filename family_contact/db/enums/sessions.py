"""Contact session enums."""

from enum import Enum


class ContactSessionStatus(str, Enum):
    """
    Contact session lifecycle status.

    Flow: scheduled → completed
              ↘ cancelled

    Both completed and cancelled are terminal.
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AttendanceStatus(str, Enum):
    ATTENDED = "attended"
    DID_NOT_ATTEND = "did_not_attend"
    LATE = "late"
    LEFT_EARLY = "left_early"


class InteractionQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    SATISFACTORY = "satisfactory"
    POOR = "poor"
    CONCERNING = "concerning"


DEFAULT_CONTACT_SESSION_STATUS = ContactSessionStatus.SCHEDULED
