"""
Audit Log Repository - Data access layer for the audit trail
"""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import and_, or_

from repositories.base import BaseRepository
from domain.enums import AuditAction
from domain.models import AuditLog


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for audit log entries. There is no update path."""

    def __init__(self, db: Session):
        super().__init__(db, AuditLog)

    def append(
        self,
        actor_id: str,
        actor_name: Optional[str],
        action: AuditAction,
        details: Dict[str, Any],
    ) -> AuditLog:
        """Stage a new audit entry"""
        entry = AuditLog(
            actor_id=actor_id,
            actor_name=actor_name,
            action=action,
            details=details,
        )
        return self.create(entry)

    def find_page(
        self, page_size: int, after: Optional[Tuple[datetime, UUID]] = None
    ) -> List[AuditLog]:
        """One page in (timestamp desc, id desc) order"""
        query = self.db.query(AuditLog)
        if after is not None:
            after_ts, after_id = after
            query = query.filter(
                or_(
                    AuditLog.timestamp < after_ts,
                    and_(AuditLog.timestamp == after_ts, AuditLog.log_id < after_id),
                )
            )
        return (
            query.order_by(AuditLog.timestamp.desc(), AuditLog.log_id.desc())
            .limit(page_size)
            .all()
        )

    def delete_many(self, log_ids: List[UUID]) -> int:
        """Delete the given entries; unknown ids are ignored"""
        deleted = (
            self.db.query(AuditLog)
            .filter(AuditLog.log_id.in_(log_ids))
            .delete(synchronize_session=False)
        )
        return deleted
