from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studyfeed.api.deps import blank_to_none, commit_or_500, require_viewer
from studyfeed.core.config import settings
from studyfeed.core.constants import MSG_ACHIEVEMENT_TITLE_REQUIRED
from studyfeed.core.time_utils import local_today
from studyfeed.db import get_db
from studyfeed.models.achievement import Achievement
from studyfeed.schemas.achievement import AchievementCreate, AchievementRead
from studyfeed.services.enrichment import owners_by_id

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=list[AchievementRead])
def list_achievements(db: Session = Depends(get_db)):
    """Everyone's milestone announcements, newest first."""
    rows = (
        db.query(Achievement)
        .order_by(Achievement.created_at.desc())
        .limit(settings.feed_record_limit)
        .all()
    )
    owners = owners_by_id(db, (r.user_id for r in rows))
    results: list[AchievementRead] = []
    for row in rows:
        item = AchievementRead.model_validate(row)
        owner = owners.get(row.user_id)
        if owner:
            item.user_display_name = owner.display_name
        results.append(item)
    return results


@router.post("", response_model=AchievementRead)
def create_achievement(
    payload: AchievementCreate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=422, detail=MSG_ACHIEVEMENT_TITLE_REQUIRED)

    row = Achievement(
        user_id=viewer_id,
        title=title,
        description=blank_to_none(payload.description),
        achievement_date=payload.achievement_date or local_today(settings.timezone),
    )
    db.add(row)
    commit_or_500(db, "Posting achievement")
    db.refresh(row)
    return row
