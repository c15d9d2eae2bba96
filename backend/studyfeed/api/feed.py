from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studyfeed.api.deps import get_feed_store, get_viewer_id
from studyfeed.db import get_db
from studyfeed.schemas.feed import FeedRead, FeedTab
from studyfeed.services.feed import build_view, fetch_snapshot
from studyfeed.services.feed_store import FeedStore

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=FeedRead)
def get_feed(
    tab: FeedTab = Query(FeedTab.activity),
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: Session = Depends(get_db),
    store: FeedStore = Depends(get_feed_store),
):
    """
    Landing-view feed.

    `activity` shows records from followed users and the viewer (everyone's,
    when the viewer follows no one); `goals` shows the latest goals of all
    users, newest first.
    """
    token = store.begin_fetch(viewer_id)
    snapshot = fetch_snapshot(db, viewer_id)

    # A stale result is dropped; the newer stored state is served instead
    store.apply_fetch(token, snapshot)
    view = store.view(viewer_id, tab) or build_view(snapshot, tab)

    return FeedRead(
        tab=view.tab,
        records=list(view.records),
        goals=list(view.goals),
        followed_ids=sorted(view.followed_ids),
        is_recommendation=view.is_recommendation,
        pending_ids=sorted(view.pending_ids),
    )
