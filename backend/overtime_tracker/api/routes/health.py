from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from overtime_tracker.core.logging import get_logger
from overtime_tracker.db.session import get_session

router = APIRouter(prefix="/health", tags=["health"])
logger = get_logger(__name__)


@router.get("", summary="Liveness probe")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready", summary="Readiness probe")
def readiness(db: Session = Depends(get_session)) -> dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("database_unreachable", error=str(exc))
        raise HTTPException(status_code=503, detail="Database unavailable") from exc
    return {"status": "ready", "database": "ok"}
