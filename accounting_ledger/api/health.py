"""Liveness plus database reachability."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from accounting_ledger.config import get_settings
from accounting_ledger.models.base import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    settings = get_settings()
    try:
        db.scalar(select(1))
        database = "healthy"
    except SQLAlchemyError:
        database = "unhealthy"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "service": "accounting-ledger",
        "version": settings.APP_VERSION,
        "database": database,
    }
