from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class ClassCreate(BaseModel):
    """Schema for creating a class"""

    name: str = Field(..., max_length=100)
    student_count: int = Field(0, ge=0)


class ClassUpdate(ClassCreate):
    """Schema for updating a class; a rename cascades to live registrations"""

    expected_version: Optional[int] = Field(
        None, description="Reject the update if the class changed since this version"
    )


class ClassResponse(BaseModel):
    class_id: UUID
    name: str
    student_count: int
    version: int
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
