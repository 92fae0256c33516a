"""Class management routes"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import get_class_service, get_current_actor
from api.responses import ERROR_RESPONSES
from domain.schemas import Actor, ClassCreate, ClassResponse, ClassUpdate
from services import ClassService

router = APIRouter(prefix="/classes", tags=["Classes"])
logger = logging.getLogger("mealcount.api.classes")


@router.get("", response_model=List[ClassResponse])
def list_classes(service: ClassService = Depends(get_class_service)):
    """All classes in natural order (age group, then number)."""
    return service.list_classes()


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_class(
    payload: ClassCreate,
    actor: Actor = Depends(get_current_actor),
    service: ClassService = Depends(get_class_service),
):
    return service.add_class(actor, payload)


@router.put("/{class_id}", response_model=ClassResponse, responses=ERROR_RESPONSES)
def update_class(
    class_id: UUID,
    payload: ClassUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ClassService = Depends(get_class_service),
):
    """
    Update a class. Renaming moves its live registrations to the new name.

    Send ``expected_version`` to get 409 STALE_DATA instead of overwriting
    someone else's change.
    """
    return service.update_class(actor, class_id, payload)


@router.delete("/{class_id}", responses=ERROR_RESPONSES)
def delete_class(
    class_id: UUID,
    actor: Actor = Depends(get_current_actor),
    service: ClassService = Depends(get_class_service),
):
    """Delete a class together with all of its live registrations."""
    removed = service.delete_class(actor, class_id)
    return {"status": "ok", "deleted": str(class_id), "registrations_removed": removed}
