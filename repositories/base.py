"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.

Repositories never commit: the caller owns the unit of work (see
adapters.record_store.RecordStore.session_scope), so several repository calls
can be applied atomically.
"""

from typing import Generic, TypeVar, Optional, Type, Any
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any, with_lock: bool = False) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Args:
            entity_id: Primary key value
            with_lock: Lock the row for the rest of the transaction
                (ignored by backends without SELECT ... FOR UPDATE)

        Returns:
            Entity or None if not found
        """
        if with_lock:
            return self.db.get(self.model, entity_id, with_for_update=True)
        return self.db.get(self.model, entity_id)

    def create(self, entity: ModelType) -> ModelType:
        """Stage a new entity and flush so store-assigned columns are populated"""
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: ModelType, **values) -> ModelType:
        """Apply attribute changes to an entity and flush"""
        for key, value in values.items():
            setattr(entity, key, value)
        self.db.flush()
        return entity

    def delete(self, entity: ModelType) -> None:
        """Stage deletion of an entity"""
        self.db.delete(entity)
        self.db.flush()

