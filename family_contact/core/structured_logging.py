"""Structured logging helpers (PII-safe)."""

from typing import Any
from uuid import UUID


def build_log_context(
    *,
    org_id: UUID | str | None = None,
    child_id: UUID | str | None = None,
    entity_id: UUID | str | None = None,
    operation: str | None = None,
    actor: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict carrying identifiers only (no names or notes)."""
    context: dict[str, Any] = {}
    if org_id:
        context["org_id"] = str(org_id)
    if child_id:
        context["child_id"] = str(child_id)
    if entity_id:
        context["entity_id"] = str(entity_id)
    if operation:
        context["operation"] = operation
    if actor:
        context["actor"] = actor
    return context
