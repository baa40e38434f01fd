from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text
from sqlmodel import Session
from datetime import datetime

from app.database import get_session

router = APIRouter()

@router.get("/health")
def health_check(session: Session = Depends(get_session)):
    db_status = "connected"

    try:
        # simple DB ping
        session.exec(text("SELECT 1"))
    except SQLAlchemyError:
        db_status = "disconnected"

    return {
        "status": "ok",
        "db": db_status,
        "timestamp": datetime.utcnow().isoformat()
    }
