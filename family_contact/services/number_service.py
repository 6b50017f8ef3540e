"""Human-readable sequence numbers (FM-2025-0001, SESS-2025-00001, ...)."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from family_contact.db.enums import CounterType
from family_contact.db.models import OrgCounter


def format_number(counter_type: CounterType, year: int, value: int) -> str:
    return f"{counter_type.prefix}-{year}-{value:0{counter_type.width}d}"


def next_number(
    db: Session,
    org_id: UUID,
    counter_type: CounterType,
    year: int | None = None,
) -> str:
    """
    Allocate the next number for an org/entity/year sequence.

    The counter row is locked for the rest of the transaction. Two
    transactions creating the first row of a year race on the primary
    key; the loser retries against the winner's row.
    """
    year = year or datetime.now(timezone.utc).year

    for attempt in range(3):
        counter = db.execute(
            select(OrgCounter)
            .where(OrgCounter.organization_id == org_id)
            .where(OrgCounter.counter_type == counter_type.value)
            .where(OrgCounter.year == year)
            .with_for_update()
        ).scalar_one_or_none()

        if counter is not None:
            counter.current_value += 1
            db.flush()
            return format_number(counter_type, year, counter.current_value)

        try:
            with db.begin_nested():
                counter = OrgCounter(
                    organization_id=org_id,
                    counter_type=counter_type.value,
                    year=year,
                    current_value=1,
                )
                db.add(counter)
                db.flush()
            return format_number(counter_type, year, 1)
        except IntegrityError:
            if attempt < 2:
                continue
            raise

    raise RuntimeError(f"Failed to generate {counter_type.value} number")
