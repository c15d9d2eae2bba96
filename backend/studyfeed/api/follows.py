from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyfeed.api.deps import commit_or_500, get_feed_store, require_viewer
from studyfeed.db import get_db
from studyfeed.models.follow import Follow
from studyfeed.schemas.follow import FollowStatus
from studyfeed.services.feed_store import FeedStore
from studyfeed.services.social_graph import follower_count, is_following

router = APIRouter(prefix="/follows", tags=["follows"])


def _status(db: Session, viewer_id: str, target_id: str) -> FollowStatus:
    return FollowStatus(
        target_id=target_id,
        following=is_following(db, viewer_id, target_id),
        follower_count=follower_count(db, target_id),
    )


@router.get("/{target_id}", response_model=FollowStatus)
def get_follow_status(
    target_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    return _status(db, viewer_id, target_id)


@router.post("/{target_id}", response_model=FollowStatus)
def follow(
    target_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
    store: FeedStore = Depends(get_feed_store),
):
    """Create the edge viewer -> target. Following twice is a no-op."""
    if target_id == viewer_id:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")

    if not is_following(db, viewer_id, target_id):
        db.add(Follow(follower_id=viewer_id, following_id=target_id))
        try:
            db.commit()
        except IntegrityError:
            # Concurrent duplicate: the pair is unique
            db.rollback()
        store.invalidate(viewer_id)
    return _status(db, viewer_id, target_id)


@router.delete("/{target_id}", response_model=FollowStatus)
def unfollow(
    target_id: str,
    viewer_id: str = Depends(require_viewer),
    db: Session = Depends(get_db),
    store: FeedStore = Depends(get_feed_store),
):
    (
        db.query(Follow)
        .filter(Follow.follower_id == viewer_id)
        .filter(Follow.following_id == target_id)
        .delete()
    )
    commit_or_500(db, "Unfollowing")
    store.invalidate(viewer_id)
    return _status(db, viewer_id, target_id)
