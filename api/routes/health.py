"""Health check and utility routes"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db
from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("vesta.api.health")


@router.get("/health-check")
def health_check():
    """Basic health check endpoint"""
    return {"status": "ok", "service": settings.app_name, "version": settings.app_version}


@router.get("/health-check/store")
def store_health(db: Session = Depends(get_db)):
    """Check that the local store answers a trivial query."""
    db.execute(text("SELECT 1"))
    return {"status": "ok", "store": "reachable"}
