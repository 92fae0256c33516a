"""
User account model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, UUID, Enum as SQLEnum, Index
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, utcnow
from domain.enums import Role


class AppUser(Base):
    """User account model"""

    __tablename__ = "app_user"

    user_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)
    role = Column(
        SQLEnum(Role, name="user_role", values_callable=lambda members: [m.value for m in members]),
        nullable=False,
        default=Role.TEACHER,
    )
    assigned_class = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), default=utcnow)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow)


Index("uq_app_user_email_lower", func.lower(AppUser.email), unique=True)
