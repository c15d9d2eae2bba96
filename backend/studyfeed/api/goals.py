from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from studyfeed.api.deps import blank_to_none, commit_or_500, require_viewer
from studyfeed.core.constants import MSG_TITLE_REQUIRED
from studyfeed.db import get_db
from studyfeed.models.goal import Goal
from studyfeed.schemas.goal import GoalCreate, GoalRead, GoalUpdate


router = APIRouter(prefix="/goals", tags=["goals"])


def _own_goal(db: Session, goal_id: str, viewer_id: str) -> Goal:
    row = (
        db.query(Goal)
        .filter(Goal.id == goal_id)
        .filter(Goal.user_id == viewer_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Goal not found")
    return row


@router.get("", response_model=list[GoalRead])
def list_my_goals(
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    return (
        db.query(Goal)
        .filter(Goal.user_id == viewer_id)
        .order_by(Goal.created_at.desc())
        .all()
    )


@router.post("", response_model=GoalRead)
def create_goal(
    payload: GoalCreate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=422, detail=MSG_TITLE_REQUIRED)

    row = Goal(
        user_id=viewer_id,
        title=title,
        description=blank_to_none(payload.description),
        date=payload.date,
    )
    db.add(row)
    commit_or_500(db, "Adding goal")
    db.refresh(row)
    return row


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    row = _own_goal(db, goal_id, viewer_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "title" in update_data:
        title = (update_data["title"] or "").strip()
        if not title:
            raise HTTPException(status_code=422, detail=MSG_TITLE_REQUIRED)
        row.title = title
    if "description" in update_data:
        row.description = blank_to_none(update_data["description"])
    if "date" in update_data:
        row.date = update_data["date"]

    commit_or_500(db, "Updating goal")
    db.refresh(row)
    return row


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    row = _own_goal(db, goal_id, viewer_id)
    db.delete(row)
    commit_or_500(db, "Deleting goal")
    return {"message": "Goal deleted"}
