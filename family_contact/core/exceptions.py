"""
Exception hierarchy for the contact engine.

Services raise these; the HTTP layer maps each kind to a status code once
in main.py.

Usage:
    from family_contact.core.exceptions import NotFoundError

    raise NotFoundError("Contact schedule", schedule_id)
"""

from uuid import UUID


class FamilyContactError(Exception):
    """Base exception for contact engine errors."""

    pass


class NotFoundError(FamilyContactError):
    """Referenced child, family member, schedule, session or assessment does not exist.

    Also raised when the entity exists in another organization.
    """

    def __init__(self, resource: str, resource_id: UUID | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = resource
        if resource_id is not None:
            msg += f" with ID {resource_id}"
        msg += " not found"
        super().__init__(msg)


class ContactNotAllowedError(FamilyContactError):
    """Contact was requested for a family member who fails the permission check."""

    def __init__(self, member_name: str, reason: str | None = None) -> None:
        self.member_name = member_name
        self.reason = reason
        msg = f"Contact not allowed for family member {member_name}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ValidationFailure(FamilyContactError):
    """Input was well-formed but violates an engine rule.

    Args:
        message: Human-readable explanation of what failed.
        field: Optional name of the offending field.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidTransitionError(ValidationFailure):
    """Status transition not permitted from the entity's current status."""

    def __init__(self, resource: str, current: str, action: str) -> None:
        self.resource = resource
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} {resource.lower()} with status {current}", field="status")


class CascadeInconsistencyError(FamilyContactError):
    """A session changed but its schedule counters could not be updated.

    Raised only after retries are exhausted; the surrounding transaction
    must be rolled back.
    """

    def __init__(self, schedule_id: UUID, attempts: int) -> None:
        self.schedule_id = schedule_id
        self.attempts = attempts
        super().__init__(
            f"Contact schedule {schedule_id} counters could not be updated after {attempts} attempts"
        )
