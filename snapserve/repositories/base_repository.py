"""Shared persistence helpers for SnapServe repositories."""

from typing import Generic, TypeVar, Type, Optional
from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Thin wrapper around a Session for a single mapped class.

    Repositories flush but never commit; the calling service owns the
    transaction boundary.
    """

    def __init__(self, model: Type[T], db: Session):
        """
        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> Optional[T]:
        return self.db.query(self.model).filter(self.model.id == id).first()

    def create(self, obj: T) -> T:
        """
        Add and flush a new entity so generated columns are populated.

        Args:
            obj: Transient entity

        Returns:
            The same entity, now persistent
        """
        self.db.add(obj)
        self.db.flush()
        self.db.refresh(obj)
        return obj

