from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from domain.enums import Role


class UserCreate(BaseModel):
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=200)
    role: Role = Role.TEACHER
    assigned_class: Optional[str] = None


class UserUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged"""

    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(None, min_length=1, max_length=200)
    role: Optional[Role] = None
    assigned_class: Optional[str] = None


class UserResponse(BaseModel):
    user_id: UUID
    email: str
    display_name: str
    role: Role
    assigned_class: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
