"""Audit log routes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
import logging

from api.dependencies import get_audit_service, get_current_actor
from app.config import settings
from domain.schemas import Actor, AuditDeleteRequest, AuditDeleteResult, AuditLogPage
from services import AuditLogService

router = APIRouter(prefix="/audit-logs", tags=["Audit Log"])
logger = logging.getLogger("mealcount.api.audit")


@router.get("", response_model=AuditLogPage)
def list_audit_logs(
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    cursor: Optional[str] = Query(None),
    service: AuditLogService = Depends(get_audit_service),
):
    """Audit entries, newest first."""
    return service.list_entries(page_size, cursor)


@router.post("/delete", response_model=AuditDeleteResult)
def delete_audit_logs(
    payload: AuditDeleteRequest,
    actor: Actor = Depends(get_current_actor),
    service: AuditLogService = Depends(get_audit_service),
):
    """Remove audit entries by id."""
    deleted = service.delete_entries(payload.ids)
    logger.info(f"Actor {actor.id} deleted {deleted} audit entries")
    return AuditDeleteResult(deleted=deleted)
