"""Feed aggregation for the landing view.

Fetches the latest records and goals across all users plus the viewer's
follow edges, enriches both sets in one batch, and exposes the activity
tab (filtered by the social graph) and the goals tab (unfiltered).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyfeed.core.config import settings
from studyfeed.models.goal import Goal
from studyfeed.models.study_record import StudyRecord
from studyfeed.schemas.feed import FeedTab
from studyfeed.schemas.goal import EnrichedGoal, GoalRead
from studyfeed.schemas.record import EnrichedRecord, RecordRead
from studyfeed.services.enrichment import enrich
from studyfeed.services.social_graph import filter_relevant, followed_ids_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSnapshot:
    """Immutable result of one aggregation pass, before tab filtering."""

    viewer_id: Optional[str]
    records: tuple[EnrichedRecord, ...] = ()
    goals: tuple[EnrichedGoal, ...] = ()
    followed_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class FeedView:
    tab: FeedTab
    records: tuple[EnrichedRecord, ...]
    goals: tuple[EnrichedGoal, ...]
    followed_ids: frozenset[str]
    is_recommendation: bool
    # Records whose deletion is waiting on the backend
    pending_ids: frozenset[str] = frozenset()


def fetch_snapshot(
    db: Session,
    viewer_id: Optional[str],
    record_limit: Optional[int] = None,
    goal_limit: Optional[int] = None,
) -> FeedSnapshot:
    """Run the fetch and enrichment steps for `viewer_id`.

    Read failures degrade to empty sequences so the view renders its empty
    state instead of an error.
    """
    record_limit = record_limit or settings.feed_record_limit
    goal_limit = goal_limit or settings.feed_goal_limit

    records = _safe_read(
        "records",
        lambda: [
            RecordRead.model_validate(r)
            for r in db.query(StudyRecord)
            .order_by(StudyRecord.created_at.desc())
            .limit(record_limit)
        ],
        db,
    )
    goals = _safe_read(
        "goals",
        lambda: [
            GoalRead.model_validate(g)
            for g in db.query(Goal)
            .order_by(Goal.created_at.desc())
            .limit(goal_limit)
        ],
        db,
    )
    followed = (
        _safe_read("follows", lambda: followed_ids_of(db, viewer_id), db)
        if viewer_id
        else []
    )

    try:
        enriched_records, enriched_goals = enrich(db, records, goals)
    except SQLAlchemyError as e:
        # Enrichment is best-effort: fall back to bare items
        logger.warning("feed enrichment failed: %s", e)
        db.rollback()
        enriched_records = [EnrichedRecord(**r.model_dump()) for r in records]
        enriched_goals = [EnrichedGoal(**g.model_dump()) for g in goals]

    return FeedSnapshot(
        viewer_id=viewer_id,
        records=tuple(enriched_records),
        goals=tuple(enriched_goals),
        followed_ids=frozenset(followed),
    )


def build_view(
    snapshot: FeedSnapshot,
    tab: FeedTab,
    pending_ids: frozenset[str] = frozenset(),
) -> FeedView:
    """Derive the displayed feed for `tab` from a snapshot (pure)."""
    if tab == FeedTab.activity:
        records = tuple(
            filter_relevant(snapshot.records, snapshot.viewer_id, snapshot.followed_ids)
        )
    else:
        records = snapshot.records
    return FeedView(
        tab=tab,
        records=records,
        goals=snapshot.goals,
        followed_ids=snapshot.followed_ids,
        is_recommendation=not snapshot.followed_ids,
        pending_ids=frozenset(pending_ids),
    )


def _safe_read(label: str, query, db: Session) -> list:
    try:
        return query()
    except SQLAlchemyError as e:
        logger.warning("feed read failed (%s): %s", label, e)
        db.rollback()
        return []
