"""Sequence counter enums."""

from enum import Enum


class CounterType(str, Enum):
    """Per-org, per-year number sequences and their display prefix/width."""

    FAMILY_MEMBER = "family_member"
    CONTACT_SCHEDULE = "contact_schedule"
    CONTACT_SESSION = "contact_session"
    RISK_ASSESSMENT = "risk_assessment"
    CHILD = "child"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @property
    def width(self) -> int:
        return 5 if self is CounterType.CONTACT_SESSION else 4


_PREFIXES = {
    CounterType.FAMILY_MEMBER: "FM",
    CounterType.CONTACT_SCHEDULE: "CS",
    CounterType.CONTACT_SESSION: "SESS",
    CounterType.RISK_ASSESSMENT: "CRA",
    CounterType.CHILD: "CH",
}
