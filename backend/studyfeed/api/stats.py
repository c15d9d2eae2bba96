import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.api.deps import require_viewer
from studyfeed.core.config import settings
from studyfeed.core.time_utils import local_today
from studyfeed.db import get_db
from studyfeed.models.study_record import StudyRecord
from studyfeed.schemas.stats import CalendarMonth, StatsSummary
from studyfeed.services.stats import calendar_month, summarize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


def _own_records(db: Session, viewer_id: str) -> list[StudyRecord]:
    try:
        return (
            db.query(StudyRecord)
            .filter(StudyRecord.user_id == viewer_id)
            .order_by(StudyRecord.created_at.desc())
            .all()
        )
    except SQLAlchemyError as e:
        # Reporting reads degrade to "no data"
        logger.warning("stats read failed for %s: %s", viewer_id, e)
        db.rollback()
        return []


@router.get("/summary", response_model=StatsSummary)
def get_summary(
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Today / 7-day average / current Monday-Sunday week aggregates."""
    today = local_today(settings.timezone)
    return summarize(_own_records(db, viewer_id), today, settings.timezone)


@router.get("/calendar", response_model=CalendarMonth)
def get_calendar(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    today = local_today(settings.timezone)
    return calendar_month(
        _own_records(db, viewer_id),
        year or today.year,
        month or today.month,
        settings.timezone,
    )
