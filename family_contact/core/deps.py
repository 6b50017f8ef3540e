"""FastAPI dependencies for database access."""

from typing import Generator

from sqlalchemy.orm import Session

from family_contact.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    Routers commit; services only flush.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
