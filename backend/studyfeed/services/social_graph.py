from typing import Collection, Optional, Sequence, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from studyfeed.models.follow import Follow

T = TypeVar("T")


def filter_relevant(
    items: Sequence[T],
    viewer_id: Optional[str],
    followed_ids: Collection[str],
) -> list[T]:
    """Keep items owned by someone the viewer follows, or by the viewer.

    A viewer who follows no one gets every item back (cold-start users see
    global activity as recommendations). Input order is preserved.
    """
    if not followed_ids:
        return list(items)
    allowed = set(followed_ids)
    if viewer_id is not None:
        allowed.add(viewer_id)
    return [item for item in items if item.user_id in allowed]


def followed_ids_of(db: Session, viewer_id: str) -> list[str]:
    rows = (
        db.query(Follow.following_id)
        .filter(Follow.follower_id == viewer_id)
        .order_by(Follow.created_at)
        .all()
    )
    return [r[0] for r in rows]


def follower_count(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Follow.id))
        .filter(Follow.following_id == user_id)
        .scalar()
        or 0
    )


def following_count(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Follow.id))
        .filter(Follow.follower_id == user_id)
        .scalar()
        or 0
    )


def is_following(db: Session, follower_id: str, target_id: str) -> bool:
    return (
        db.query(Follow.id)
        .filter(Follow.follower_id == follower_id)
        .filter(Follow.following_id == target_id)
        .first()
        is not None
    )
