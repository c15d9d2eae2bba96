from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class GoalBase(BaseModel):
    title: str
    description: Optional[str] = None
    date: Optional[date_type] = None  # target date, may be absent


class GoalCreate(GoalBase):
    pass


class GoalUpdate(BaseModel):
    """Schema for editing a goal (all fields optional)."""

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[date_type] = None

    model_config = ConfigDict(extra="ignore")


class GoalRead(GoalBase):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    user_id: str
    created_at: datetime


class EnrichedGoal(GoalRead):
    """A goal with the owner's display name and avatar (None on miss)."""

    user_display_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
