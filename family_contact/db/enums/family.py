"""Family member enums."""

from enum import Enum


class RelationshipType(str, Enum):
    """Relationship of the family member to the child."""

    PARENT = "parent"
    SIBLING = "sibling"
    GRANDPARENT = "grandparent"
    OTHER_RELATIVE = "other_relative"
    OTHER = "other"


class FamilyMemberStatus(str, Enum):
    """
    Family member status.

    Members are never deleted; removal is modelled by moving out of ACTIVE.
    Only ACTIVE members may have contact.
    """

    ACTIVE = "active"
    SUSPENDED = "suspended"
    RESTRICTED = "restricted"
    DECEASED = "deceased"
    NO_CONTACT = "no_contact"


class ContactRestrictionLevel(str, Enum):
    """Restriction placed on contact (court order or care plan)."""

    NONE = "none"
    SUPERVISED_ONLY = "supervised_only"
    INDIRECT_ONLY = "indirect_only"  # Letters, cards, calls
    NO_CONTACT = "no_contact"


DEFAULT_FAMILY_MEMBER_STATUS = FamilyMemberStatus.ACTIVE
