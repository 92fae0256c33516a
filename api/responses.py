"""
Standardized API response models.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Error timestamp"
    )


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    database: str = Field(..., description="Store reachability: ok or unavailable")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Check timestamp"
    )


class DataVersionResponse(BaseModel):
    """Current data version; changes after every successful mutation"""

    version: int


class StatusResponse(BaseModel):
    status: str = "ok"
    deleted: Optional[str] = None


# Documented error responses shared by mutating endpoints
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Service validation failed"},
    401: {"model": ErrorResponse, "description": "Missing actor identity"},
    409: {"model": ErrorResponse, "description": "Stale data or conflicting write"},
    503: {"model": ErrorResponse, "description": "Registration store unavailable"},
}
