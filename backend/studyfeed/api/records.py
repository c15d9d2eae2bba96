import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.api.deps import (
    commit_or_500,
    get_feed_store,
    get_viewer_id,
    require_viewer,
)
from studyfeed.core.config import settings
from studyfeed.core.constants import (
    MSG_COMMENT_REQUIRED,
    MSG_DURATION_REQUIRED,
    MSG_RECORD_NOT_FOUND,
    NO_MATERIAL_SUBJECT,
)
from studyfeed.db import get_db
from studyfeed.models.comment import Comment
from studyfeed.models.study_record import StudyRecord
from studyfeed.schemas.comment import CommentCreate, CommentRead
from studyfeed.schemas.record import EnrichedRecord, RecordCreate, RecordDetail, RecordRead
from studyfeed.services.enrichment import enrich
from studyfeed.services.feed_store import FeedStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["records"])


def first_comment_text(notes: Optional[str], amount: Optional[str]) -> str:
    """Notes as saved in the opening comment, prefixed with the study amount."""
    prefix = f"[学習量: {amount}] " if amount else ""
    return (prefix + (notes or "")).strip()


@router.post("/records", response_model=RecordRead)
def create_record(
    payload: RecordCreate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    if payload.duration <= 0:
        raise HTTPException(status_code=422, detail=MSG_DURATION_REQUIRED)

    record = StudyRecord(
        user_id=viewer_id,
        subject=payload.subject or NO_MATERIAL_SUBJECT,
        duration=payload.duration,
        date=payload.date,
        notes="",  # notes live in the first comment
    )
    db.add(record)
    commit_or_500(db, "Saving record")
    db.refresh(record)

    text = first_comment_text(payload.notes, payload.amount)
    if text:
        db.add(Comment(record_id=record.id, user_id=viewer_id, content=text))
        try:
            db.commit()
        except SQLAlchemyError as e:
            # The record is already saved; the note is best-effort
            db.rollback()
            logger.error("Saving first comment for %s failed: %s", record.id, e)

    return RecordRead.model_validate(record)


@router.get("/records/{record_id}", response_model=RecordDetail)
def get_record(
    record_id: str,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: Session = Depends(get_db),
):
    record = db.query(StudyRecord).filter(StudyRecord.id == record_id).first()
    if not record:
        raise HTTPException(status_code=404, detail=MSG_RECORD_NOT_FOUND)

    (enriched,), _ = enrich(db, [record])
    comments = (
        db.query(Comment)
        .filter(Comment.record_id == record_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
    return RecordDetail(
        record=enriched,
        comments=[CommentRead.model_validate(c) for c in comments],
        is_owner=viewer_id is not None and viewer_id == record.user_id,
    )


@router.delete("/records/{record_id}")
def delete_record(
    record_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
    store: FeedStore = Depends(get_feed_store),
):
    """Owner-only deletion; the viewer's feed drops the record once committed."""
    store.begin_delete(viewer_id, record_id)

    record = (
        db.query(StudyRecord)
        .filter(StudyRecord.id == record_id)
        .filter(StudyRecord.user_id == viewer_id)
        .first()
    )
    if not record:
        store.rollback_delete(viewer_id, record_id)
        raise HTTPException(status_code=404, detail=MSG_RECORD_NOT_FOUND)

    db.delete(record)  # comments cascade
    try:
        commit_or_500(db, "Deleting record")
    except HTTPException:
        store.rollback_delete(viewer_id, record_id)
        raise

    store.commit_delete(viewer_id, record_id)
    return {"message": "Record deleted"}


@router.get("/records/{record_id}/comments", response_model=list[CommentRead])
def list_comments(record_id: str, db: Session = Depends(get_db)):
    return (
        db.query(Comment)
        .filter(Comment.record_id == record_id)
        .order_by(Comment.created_at.asc())
        .all()
    )


@router.post("/records/{record_id}/comments", response_model=CommentRead)
def add_comment(
    record_id: str,
    payload: CommentCreate,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=422, detail=MSG_COMMENT_REQUIRED)
    exists = db.query(StudyRecord.id).filter(StudyRecord.id == record_id).first()
    if not exists:
        raise HTTPException(status_code=404, detail=MSG_RECORD_NOT_FOUND)

    comment = Comment(record_id=record_id, user_id=viewer_id, content=content)
    db.add(comment)
    commit_or_500(db, "Posting comment")
    db.refresh(comment)
    return comment


@router.get("/users/{user_id}/records", response_model=list[EnrichedRecord])
def list_user_records(
    user_id: str,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """A user's latest records (profile timeline), newest first."""
    rows = (
        db.query(StudyRecord)
        .filter(StudyRecord.user_id == user_id)
        .order_by(StudyRecord.created_at.desc())
        .limit(min(limit or settings.user_record_limit, settings.user_record_limit))
        .all()
    )
    records, _ = enrich(db, rows)
    return records
