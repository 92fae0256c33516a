"""Announcement routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import get_announcement_service, get_current_actor
from api.responses import ERROR_RESPONSES, StatusResponse
from domain.schemas import (
    Actor,
    AnnouncementCreate,
    AnnouncementResponse,
    AnnouncementUpdate,
    MarkReadRequest,
    UnreadCountResponse,
)
from services import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["Announcements"])
logger = logging.getLogger("mealcount.api.announcements")


@router.get("", response_model=List[AnnouncementResponse])
def list_announcements(service: AnnouncementService = Depends(get_announcement_service)):
    """All announcements, newest first."""
    return service.list_announcements()


@router.post(
    "",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_announcement(
    payload: AnnouncementCreate,
    actor: Actor = Depends(get_current_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.add_announcement(actor, payload)


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(
    actor: Actor = Depends(get_current_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """Number of announcements the caller has not read yet."""
    return UnreadCountResponse(unread=service.unread_count(actor))


@router.post("/read")
def mark_read(
    payload: MarkReadRequest,
    actor: Actor = Depends(get_current_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    marked = service.mark_read(actor, payload.ids)
    return {"status": "ok", "marked": marked}


@router.put("/{announcement_id}", response_model=AnnouncementResponse, responses=ERROR_RESPONSES)
def update_announcement(
    announcement_id: UUID,
    payload: AnnouncementUpdate,
    actor: Actor = Depends(get_current_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.update_announcement(actor, announcement_id, payload)


@router.delete("/{announcement_id}", response_model=StatusResponse)
def delete_announcement(
    announcement_id: UUID,
    actor: Actor = Depends(get_current_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    service.delete_announcement(actor, announcement_id)
    return StatusResponse(status="ok", deleted=str(announcement_id))
