"""
API dependencies for dependency injection
"""

from typing import Generator
from fastapi import Depends
from sqlalchemy.orm import Session

from domain.models import get_db_session
from repositories.local_store import LocalStore


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_store(db: Session = Depends(get_db)) -> LocalStore:
    """Local store bound to the request's session"""
    return LocalStore(db)
