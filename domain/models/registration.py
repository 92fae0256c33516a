"""
Meal registration models: live headcounts and their archived copies.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    Date,
    Integer,
    UUID,
    Enum as SQLEnum,
    CheckConstraint,
    UniqueConstraint,
    Index,
)
import uuid

from domain.models.database import Base, utcnow
from domain.enums import MealType


def _meal_type_column():
    return Column(
        SQLEnum(
            MealType,
            name="meal_type",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )


class Registration(Base):
    """Headcount for one (date, class, meal type). Zero counts are never stored."""

    __tablename__ = "registration"

    registration_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False)
    class_name = Column(Text, nullable=False)
    meal_type = _meal_type_column()
    count = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    registered_by = Column(Text)
    registered_by_id = Column(Text)
    updated_at = Column(TIMESTAMP(timezone=True), default=utcnow, onupdate=utcnow)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint(
            "date", "class_name", "meal_type", name="uq_registration_date_class_meal"
        ),
        CheckConstraint("count > 0", name="ck_registration_count_positive"),
        Index("ix_registration_date_id", "date", "registration_id"),
        Index("ix_registration_class_name", "class_name"),
    )


class ArchivedRegistration(Base):
    """Read-only copy of a registration moved out of the live table"""

    __tablename__ = "archived_registration"

    archived_registration_id = Column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    source_registration_id = Column(UUID(as_uuid=True), nullable=False)
    date = Column(Date, nullable=False, index=True)
    class_name = Column(Text, nullable=False)
    meal_type = _meal_type_column()
    count = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    registered_by = Column(Text)
    registered_by_id = Column(Text)
    updated_at = Column(TIMESTAMP(timezone=True))
    archived_at = Column(TIMESTAMP(timezone=True), default=utcnow, nullable=False)
