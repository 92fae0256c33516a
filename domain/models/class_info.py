"""
Class (group of children) model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, Integer, UUID, CheckConstraint, Index
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base, utcnow


class ClassInfo(Base):
    """A class that registers meals; names are unique ignoring case"""

    __tablename__ = "class_info"

    class_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    student_count = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("student_count >= 0", name="ck_class_student_count_nonneg"),
    )


Index("uq_class_info_name_lower", func.lower(ClassInfo.name), unique=True)
