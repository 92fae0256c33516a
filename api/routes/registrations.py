"""Meal registration routes: upsert, conflict preview, optimistic update, query"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
import logging

from api.dependencies import (
    get_current_actor,
    get_optimistic_update_service,
    get_preview_service,
    get_query_service,
    get_registration_service,
    get_upsert_service,
)
from api.responses import ERROR_RESPONSES
from app.config import settings
from domain.schemas import (
    Actor,
    BulkDeleteRequest,
    ConflictPreviewRequest,
    ConflictPreviewResult,
    DeleteResult,
    OptimisticUpdateRequest,
    RegistrationFilter,
    RegistrationPage,
    UpdateResult,
    UpsertRequest,
    UpsertResult,
)
from services import (
    ConflictPreviewService,
    OptimisticUpdateService,
    QueryService,
    RegistrationService,
    UpsertService,
)

router = APIRouter(prefix="/registrations", tags=["Registrations"])
logger = logging.getLogger("mealcount.api.registrations")


@router.post("", response_model=UpsertResult, responses=ERROR_RESPONSES)
def upsert_registrations(
    payload: UpsertRequest,
    actor: Actor = Depends(get_current_actor),
    service: UpsertService = Depends(get_upsert_service),
):
    """
    Register headcounts for keys that nobody else has filled in.

    A count of 0 removes the registration. Re-sending the same payload is a no-op.
    Use POST /registrations/preview first; when it reports existing values,
    send the edit through PUT /registrations instead.
    """
    return service.upsert(actor, payload.registrations)


@router.post("/preview", response_model=ConflictPreviewResult)
def preview_conflicts(
    payload: ConflictPreviewRequest,
    service: ConflictPreviewService = Depends(get_preview_service),
):
    """
    List live registrations the candidates would overwrite.

    The returned ``existing`` records are the ``originals`` to send with a
    confirmed PUT /registrations.
    """
    return service.preview(payload.candidates, payload.keys)


@router.put("", response_model=UpdateResult, responses=ERROR_RESPONSES)
def update_registrations(
    payload: OptimisticUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    service: OptimisticUpdateService = Depends(get_optimistic_update_service),
):
    """
    Apply an edit based on a previously read snapshot.

    Responds 409 STALE_DATA without writing anything if any of the
    ``originals`` changed since it was read; reload and edit again.
    """
    return service.update(actor, payload.registrations, payload.originals)


@router.get("", response_model=RegistrationPage)
def get_registrations(
    date_from: Optional[date] = Query(None, description="Inclusive lower date bound"),
    date_to: Optional[date] = Query(None, description="Inclusive upper date bound"),
    dates: Optional[List[date]] = Query(None, description="Explicit dates"),
    class_names: Optional[List[str]] = Query(None, description="Class allow-list"),
    page_size: Optional[int] = Query(None, ge=1, description="Records per page"),
    cursor: Optional[str] = Query(None, description="Cursor from the previous page"),
    fetch_all: bool = Query(False, description="Return every match in one response"),
    skip_count: bool = Query(False, description="Skip the total count"),
    service: QueryService = Depends(get_query_service),
):
    """Query live registrations, newest date first."""
    filters = RegistrationFilter(
        date_from=date_from, date_to=date_to, dates=dates, class_names=class_names
    )
    if not fetch_all and page_size is None:
        page_size = settings.default_page_size
    return service.get_registrations(
        filters,
        page_size=page_size,
        cursor=cursor,
        fetch_all=fetch_all,
        skip_count=skip_count,
    )


@router.delete("", response_model=DeleteResult, responses=ERROR_RESPONSES)
def delete_registrations(
    class_name: str = Query(..., min_length=1),
    day: date = Query(..., alias="date"),
    actor: Actor = Depends(get_current_actor),
    service: RegistrationService = Depends(get_registration_service),
):
    """Delete all meals registered for one class on one day."""
    return service.delete_for_class_date(actor, class_name, day)


@router.post(
    "/bulk-delete",
    response_model=DeleteResult,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
def bulk_delete_registrations(
    payload: BulkDeleteRequest,
    actor: Actor = Depends(get_current_actor),
    service: RegistrationService = Depends(get_registration_service),
):
    """Delete the registrations of several (class, date) pairs at once."""
    return service.delete_many(actor, payload.items)
