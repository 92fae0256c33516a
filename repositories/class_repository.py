"""
Class Repository - Data access layer for class records
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import ClassInfo


class ClassRepository(BaseRepository[ClassInfo]):
    """Repository for class data access"""

    def __init__(self, db: Session):
        super().__init__(db, ClassInfo)

    def list_all(self) -> List[ClassInfo]:
        return self.db.query(ClassInfo).all()

    def get_by_name(self, name: str) -> Optional[ClassInfo]:
        """Case-insensitive lookup by name"""
        return (
            self.db.query(ClassInfo)
            .filter(func.lower(ClassInfo.name) == name.lower())
            .first()
        )

    def name_taken(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        query = self.db.query(ClassInfo.class_id).filter(
            func.lower(ClassInfo.name) == name.lower()
        )
        if exclude_id is not None:
            query = query.filter(ClassInfo.class_id != exclude_id)
        return query.first() is not None

    def count_all(self) -> int:
        return self.db.query(func.count(ClassInfo.class_id)).scalar() or 0
