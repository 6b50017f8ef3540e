"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for every test
- Organization / child / family member fixtures
- HTTPX AsyncClient with get_db overridden
"""
import os
import uuid
from datetime import date
from typing import AsyncGenerator, Generator

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from family_contact.core.deps import get_db
from family_contact.db.base import Base
from family_contact.db.enums import ContactFrequency, ContactType, RelationshipType
from family_contact.db.models import Child, FamilyMember, Organization
from family_contact.db.session import SessionLocal, engine
from family_contact.main import app
from family_contact.schemas.contact_schedule import ContactScheduleCreate
from family_contact.schemas.family_member import FamilyMemberCreate
from family_contact.services import child_service, family_member_service


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema and session per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_org(db: Session) -> Organization:
    """Create a test organization."""
    org = Organization(
        id=uuid.uuid4(),
        name="Test Children's Home",
        slug=f"test-org-{uuid.uuid4().hex[:8]}",
    )
    db.add(org)
    db.flush()
    return org


@pytest.fixture(scope="function")
def test_child(db: Session, test_org: Organization) -> Child:
    return child_service.create_child(db, test_org.id, "Sam", "Taylor", date(2012, 5, 4))


@pytest.fixture(scope="function")
def test_member(db: Session, test_org: Organization, test_child: Child) -> FamilyMember:
    """An active parent with no restrictions."""
    return family_member_service.register_family_member(
        db,
        FamilyMemberCreate(
            child_id=test_child.id,
            organization_id=test_org.id,
            first_name="Alex",
            last_name="Taylor",
            relationship_type=RelationshipType.PARENT,
            has_parental_responsibility=True,
            created_by="sw-1",
        ),
    )


@pytest.fixture(scope="function")
def other_child_member(db: Session, test_org: Organization) -> FamilyMember:
    """A parent registered against a second child in the same organization."""
    other_child = child_service.create_child(db, test_org.id, "Jordan", "Reid", date(2014, 9, 1))
    return family_member_service.register_family_member(
        db,
        FamilyMemberCreate(
            child_id=other_child.id,
            organization_id=test_org.id,
            first_name="Casey",
            last_name="Reid",
            relationship_type=RelationshipType.PARENT,
            created_by="sw-1",
        ),
    )


@pytest.fixture(scope="function")
def schedule_data(test_org: Organization, test_child: Child, test_member: FamilyMember):
    """Factory for a weekly face-to-face schedule starting 2025-01-01."""
    def _make(**overrides) -> ContactScheduleCreate:
        values = dict(
            child_id=test_child.id,
            family_member_id=test_member.id,
            organization_id=test_org.id,
            contact_type=ContactType.FACE_TO_FACE,
            contact_frequency=ContactFrequency.WEEKLY,
            start_date=date(2025, 1, 1),
            created_by="sw-1",
        )
        values.update(overrides)
        return ContactScheduleCreate(**values)

    return _make


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient sharing the test's database session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
