"""Archive routes"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
import logging

from api.dependencies import get_archive_service, get_current_actor, get_query_service
from api.responses import ERROR_RESPONSES
from domain.schemas import (
    Actor,
    ArchiveRequest,
    ArchiveResult,
    ArchivedRegistrationRecord,
    RegistrationFilter,
)
from services import ArchiveService, QueryService

router = APIRouter(prefix="/archive", tags=["Archive"])
logger = logging.getLogger("mealcount.api.archive")


@router.post("", response_model=ArchiveResult, responses=ERROR_RESPONSES)
def archive_month(
    payload: ArchiveRequest,
    actor: Actor = Depends(get_current_actor),
    service: ArchiveService = Depends(get_archive_service),
):
    """Move every live registration of a month into the archive (all or nothing)."""
    result = service.archive_month(actor, payload.year, payload.month)
    logger.info(f"Archived {result.archived} registrations for {payload.year}-{payload.month:02d}")
    return result


@router.get("/registrations", response_model=List[ArchivedRegistrationRecord])
def get_archived_registrations(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    class_names: Optional[List[str]] = Query(None),
    service: QueryService = Depends(get_query_service),
):
    """Read archived registrations, newest date first."""
    filters = RegistrationFilter(date_from=date_from, date_to=date_to, class_names=class_names)
    return service.get_archived_registrations(filters)
