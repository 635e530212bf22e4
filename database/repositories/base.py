import uuid
from typing import Any, Optional

from sqlalchemy.orm import Session


def to_uuid(value: Any) -> Optional[uuid.UUID]:
    """Coerce an id to UUID, or None when it is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db
