"""
Announcement Repository - Data access layer for announcements
"""

from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Announcement


class AnnouncementRepository(BaseRepository[Announcement]):
    """Repository for announcement data access"""

    def __init__(self, db: Session):
        super().__init__(db, Announcement)

    def list_newest_first(self) -> List[Announcement]:
        return (
            self.db.query(Announcement)
            .order_by(Announcement.created_at.desc(), Announcement.announcement_id.desc())
            .all()
        )

    def get_many(self, announcement_ids: List[UUID]) -> List[Announcement]:
        if not announcement_ids:
            return []
        return (
            self.db.query(Announcement)
            .filter(Announcement.announcement_id.in_(announcement_ids))
            .all()
        )
