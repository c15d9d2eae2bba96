from enum import Enum

from pydantic import BaseModel

from studyfeed.schemas.goal import EnrichedGoal
from studyfeed.schemas.record import EnrichedRecord


class FeedTab(str, Enum):
    activity = "activity"
    goals = "goals"


class FeedRead(BaseModel):
    tab: FeedTab
    records: list[EnrichedRecord]
    goals: list[EnrichedGoal]
    followed_ids: list[str]
    # True when the viewer follows no one and sees global activity instead
    is_recommendation: bool
    # Ids of records being deleted; clients render them as pending
    pending_ids: list[str] = []
