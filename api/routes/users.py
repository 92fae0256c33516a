"""User management routes"""

from fastapi import APIRouter, Depends, status
import logging
from uuid import UUID
from typing import List

from api.dependencies import get_current_actor, get_user_service
from api.responses import ERROR_RESPONSES, StatusResponse
from domain.schemas import Actor, UserCreate, UserResponse, UserUpdate
from services import UserService

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("mealcount.api.users")


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
def create_user(
    user: UserCreate,
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
):
    """Create a new user from JSON body"""
    return service.add_user(actor, user)


@router.get("", response_model=List[UserResponse])
def get_all_users(service: UserService = Depends(get_user_service)):
    """Return all users."""
    return service.list_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID, service: UserService = Depends(get_user_service)):
    return service.get_user(user_id)


@router.put("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
def update_user(
    user_id: UUID,
    payload: UserUpdate,
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
):
    """Partially update a user; omitted fields keep their value."""
    return service.update_user(actor, user_id, payload)


@router.delete("/{user_id}", response_model=StatusResponse)
def delete_user(
    user_id: UUID,
    actor: Actor = Depends(get_current_actor),
    service: UserService = Depends(get_user_service),
):
    """Delete a user."""
    service.delete_user(actor, user_id)
    return StatusResponse(status="ok", deleted=str(user_id))
