"""
Audit trail model.
"""

from sqlalchemy import Column, Text, TIMESTAMP, JSON, UUID, Enum as SQLEnum, Index
import uuid

from domain.models.database import Base, utcnow
from domain.enums import AuditAction


class AuditLog(Base):
    """One immutable entry per mutating operation"""

    __tablename__ = "audit_log"

    log_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    timestamp = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    actor_id = Column(Text, nullable=False)
    actor_name = Column(Text)
    action = Column(
        SQLEnum(
            AuditAction,
            name="audit_action",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    details = Column(JSON, nullable=False, default=dict)

    __table_args__ = (Index("ix_audit_log_timestamp_id", "timestamp", "log_id"),)
