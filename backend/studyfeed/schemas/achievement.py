from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AchievementCreate(BaseModel):
    title: str
    description: Optional[str] = None
    achievement_date: Optional[date] = None  # defaults to today


class AchievementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    achievement_date: date
    created_at: datetime
    user_display_name: Optional[str] = None
