"""Health check and data version routes"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_data_version, get_db
from api.responses import DataVersionResponse, HealthResponse
from app.config import settings
from services import DataVersionChannel

router = APIRouter(tags=["Health"])
logger = logging.getLogger("mealcount.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Basic health check endpoint; also pings the registration store"""
    database = "ok"
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the store: %s", e)
        database = "unavailable"
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
        database=database,
    )


@router.get("/data-version", response_model=DataVersionResponse)
def data_version(versions: DataVersionChannel = Depends(get_data_version)):
    """Clients poll this and refetch cached pages when the value changes."""
    return DataVersionResponse(version=versions.current())
