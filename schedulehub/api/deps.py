from typing import Generator
from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session

from schedulehub.core.errors import SchedulingError, ValidationError, NotFoundError, ConflictError
from schedulehub.db.database import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_organization_id(x_organization_id: int = Header(...)) -> int:
    """Tenant of the request; every query is scoped to it."""
    if x_organization_id <= 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid organization id")
    return x_organization_id


def to_http_exception(exc: SchedulingError) -> HTTPException:
    """Map a domain error onto its HTTP status."""
    if isinstance(exc, ConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": exc.message, "details": exc.details},
        )
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
