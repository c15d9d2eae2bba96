import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.core.constants import MSG_LOGIN_REQUIRED
from studyfeed.services.feed_store import FeedStore, feed_store

logger = logging.getLogger(__name__)


def get_viewer_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Authenticated user id forwarded by the auth gateway, if any."""
    if x_user_id is None:
        return None
    x_user_id = x_user_id.strip()
    return x_user_id or None


def require_viewer(viewer_id: Optional[str] = Depends(get_viewer_id)) -> str:
    if viewer_id is None:
        raise HTTPException(status_code=401, detail=MSG_LOGIN_REQUIRED)
    return viewer_id


def get_feed_store() -> FeedStore:
    return feed_store


def commit_or_500(db: Session, action: str) -> None:
    """Commit, or roll back and surface the backend error verbatim."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s failed: %s", action, e)
        raise HTTPException(status_code=500, detail=f"{action} failed: {e}")


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
