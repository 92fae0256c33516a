from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi.encoders import jsonable_encoder

from adapters.record_store import RecordStore
from app.exceptions import AppError, ServiceValidationError
from domain.enums import AuditAction
from domain.schemas import Actor, AuditLogEntry, AuditLogPage
from repositories.audit_log_repository import AuditLogRepository
from repositories.pagination import decode_cursor, encode_cursor
from services.base import BaseService


class AuditLogService(BaseService):
    """Append-only audit trail.

    ``record`` is called by every other service after its mutation committed.
    It never gates a decision: if the append itself fails, the failure is
    logged with the full entry and the caller's result stands.
    """

    def __init__(self, store: RecordStore):
        super().__init__("mealcount.audit")
        self.store = store

    def record(self, actor: Actor, action: AuditAction, details: Dict[str, Any]) -> Optional[UUID]:
        """
        Append one audit entry.

        Args:
            actor: Who performed the mutation
            action: Audited action kind
            details: Action-specific payload (dates and enums are JSON-encoded)

        Returns:
            The new entry id, or None if the append failed
        """
        payload = jsonable_encoder(details)
        try:
            with self.store.session_scope() as session:
                entry = AuditLogRepository(session).append(
                    actor_id=actor.id,
                    actor_name=actor.display_name,
                    action=action,
                    details=payload,
                )
                log_id = entry.log_id
        except AppError as exc:
            self.log_error(
                "audit_append_failed",
                action=action.value,
                actor_id=actor.id,
                error=exc.code,
                details=payload,
            )
            return None

        self.log_info("audit_recorded", action=action.value, actor_id=actor.id, log_id=log_id)
        return log_id

    def list_entries(self, page_size: int, cursor: Optional[str] = None) -> AuditLogPage:
        """
        List audit entries, newest first.

        Args:
            page_size: Maximum number of entries to return
            cursor: Opaque cursor returned by the previous page

        Returns:
            AuditLogPage with entries and the next cursor (None when exhausted)

        Raises:
            ServiceValidationError: If page_size is not positive or cursor is malformed
        """
        if page_size < 1:
            raise ServiceValidationError("page_size must be at least 1")

        after = None
        if cursor:
            raw_ts, raw_id = decode_cursor(cursor, 2)
            try:
                after = (datetime.fromisoformat(raw_ts), UUID(raw_id))
            except ValueError:
                raise ServiceValidationError("Invalid pagination cursor", details={"cursor": cursor})

        with self.store.session_scope() as session:
            rows = AuditLogRepository(session).find_page(page_size, after)
            entries = [AuditLogEntry.model_validate(r) for r in rows]

        next_cursor = None
        if len(entries) == page_size:
            last = entries[-1]
            next_cursor = encode_cursor(last.timestamp.isoformat(), last.log_id)
        return AuditLogPage(entries=entries, next_cursor=next_cursor)

    def delete_entries(self, ids: List[UUID]) -> int:
        """Bulk-delete entries by id; housekeeping, not itself audited"""
        if not ids:
            return 0
        with self.store.session_scope() as session:
            deleted = AuditLogRepository(session).delete_many(ids)
        self.log_info("audit_entries_deleted", requested=len(ids), deleted=deleted)
        return deleted
