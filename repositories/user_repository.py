"""
User Repository - Data access layer for user accounts
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func

from repositories.base import BaseRepository
from domain.models import AppUser


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def list_all(self) -> List[AppUser]:
        """All users ordered by display name"""
        return self.db.query(AppUser).order_by(AppUser.display_name).all()

    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Get user by email, ignoring case"""
        return (
            self.db.query(AppUser)
            .filter(func.lower(AppUser.email) == email.lower())
            .first()
        )

    def email_taken(self, email: str, exclude_id: Optional[UUID] = None) -> bool:
        query = self.db.query(AppUser.user_id).filter(
            func.lower(AppUser.email) == email.lower()
        )
        if exclude_id is not None:
            query = query.filter(AppUser.user_id != exclude_id)
        return query.first() is not None
