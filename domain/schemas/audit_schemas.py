from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID

from domain.enums import AuditAction


class AuditLogEntry(BaseModel):
    """Schema for audit log response"""

    log_id: UUID
    timestamp: datetime
    actor_id: str
    actor_name: Optional[str] = None
    action: AuditAction
    details: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class AuditLogPage(BaseModel):
    entries: List[AuditLogEntry]
    next_cursor: Optional[str] = None


class AuditDeleteRequest(BaseModel):
    ids: List[UUID] = Field(default_factory=list)


class AuditDeleteResult(BaseModel):
    deleted: int
