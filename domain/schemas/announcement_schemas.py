from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)


class AnnouncementResponse(BaseModel):
    announcement_id: UUID
    title: str
    content: str
    created_at: datetime
    created_by: Optional[str] = None
    created_by_id: Optional[str] = None
    read_by: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class MarkReadRequest(BaseModel):
    ids: List[UUID] = Field(default_factory=list)


class UnreadCountResponse(BaseModel):
    unread: int
