from typing import List, Optional
from uuid import UUID

from adapters.record_store import RecordStore
from app.exceptions import NotFoundError
from domain.enums import AuditAction
from domain.models import Announcement
from domain.schemas import (
    Actor,
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from repositories.announcement_repository import AnnouncementRepository
from services.audit_service import AuditLogService
from services.base import BaseService


class AnnouncementService(BaseService):
    """Broadcast messages and per-user read tracking"""

    def __init__(self, store: RecordStore, audit_log: Optional[AuditLogService] = None):
        super().__init__("mealcount.announcements")
        self.store = store
        self.audit_log = audit_log or AuditLogService(store)

    def list_announcements(self) -> List[AnnouncementResponse]:
        """All announcements, newest first"""
        with self.store.session_scope() as session:
            rows = AnnouncementRepository(session).list_newest_first()
            return [AnnouncementResponse.model_validate(row) for row in rows]

    def add_announcement(self, actor: Actor, data: AnnouncementCreate) -> AnnouncementResponse:
        """Publish an announcement; the author has read it already"""
        with self.store.session_scope() as session:
            row = AnnouncementRepository(session).create(
                Announcement(
                    title=data.title.strip(),
                    content=data.content,
                    created_by=actor.display_name,
                    created_by_id=actor.id,
                    read_by=[actor.id],
                )
            )
            created = AnnouncementResponse.model_validate(row)

        self.log_info("announcement_created", announcement_id=created.announcement_id)
        self.audit_log.record(actor, AuditAction.CREATE_ANNOUNCEMENT, {"title": created.title})
        return created

    def update_announcement(
        self, actor: Actor, announcement_id: UUID, data: AnnouncementUpdate
    ) -> AnnouncementResponse:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        with self.store.session_scope() as session:
            repo = AnnouncementRepository(session)
            row = repo.get_by_id(announcement_id)
            if row is None:
                raise NotFoundError(f"Announcement {announcement_id} not found")
            repo.update(row, **changes)
            updated = AnnouncementResponse.model_validate(row)

        self.log_info("announcement_updated", announcement_id=announcement_id)
        self.audit_log.record(
            actor,
            AuditAction.UPDATE_ANNOUNCEMENT,
            {"announcement_id": announcement_id, "new_title": changes.get("title")},
        )
        return updated

    def delete_announcement(self, actor: Actor, announcement_id: UUID) -> None:
        with self.store.session_scope() as session:
            repo = AnnouncementRepository(session)
            row = repo.get_by_id(announcement_id)
            if row is None:
                raise NotFoundError(f"Announcement {announcement_id} not found")
            repo.delete(row)

        self.log_info("announcement_deleted", announcement_id=announcement_id)
        self.audit_log.record(
            actor, AuditAction.DELETE_ANNOUNCEMENT, {"announcement_id": announcement_id}
        )

    def mark_read(self, actor: Actor, ids: List[UUID]) -> int:
        """Add the actor to read_by of each announcement; returns how many changed"""
        if not ids:
            return 0
        marked = 0
        with self.store.session_scope() as session:
            for row in AnnouncementRepository(session).get_many(ids):
                if actor.id not in row.read_by:
                    row.read_by.append(actor.id)
                    marked += 1
        self.log_info("announcements_marked_read", actor_id=actor.id, marked=marked)
        return marked

    def unread_count(self, actor: Actor) -> int:
        with self.store.session_scope() as session:
            rows = AnnouncementRepository(session).list_newest_first()
            return sum(1 for row in rows if actor.id not in (row.read_by or []))
