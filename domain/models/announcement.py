"""
Announcement model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, JSON, UUID
from sqlalchemy.ext.mutable import MutableList
import uuid

from domain.models.database import Base, utcnow


class Announcement(Base):
    """Message broadcast to all users; read_by holds the ids that have seen it"""

    __tablename__ = "announcement"

    announcement_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    created_by = Column(Text)
    created_by_id = Column(Text)
    read_by = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
