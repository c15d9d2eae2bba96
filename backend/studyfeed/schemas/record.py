from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studyfeed.core.constants import NO_MATERIAL_SUBJECT
from studyfeed.schemas.comment import CommentRead


class RecordBase(BaseModel):
    subject: str = NO_MATERIAL_SUBJECT
    duration: int = Field(ge=0)  # minutes
    date: str  # calendar string as displayed, e.g. '2025年01月05日 14:30'


class RecordCreate(RecordBase):
    """Schema for logging a study session.

    `notes` and `amount` are not stored on the record itself; they become
    the record's first comment.
    """

    notes: Optional[str] = None
    amount: Optional[str] = None


class RecordRead(RecordBase):
    """A stored study record."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    user_id: str
    notes: str = ""
    created_at: datetime


class EnrichedRecord(RecordRead):
    """A record with display metadata resolved by batched lookup.

    Every field is None on lookup miss.
    """

    material_image: Optional[str] = None
    user_display_name: Optional[str] = None
    user_avatar_url: Optional[str] = None


class RecordDetail(BaseModel):
    record: EnrichedRecord
    comments: list[CommentRead]
    is_owner: bool = False
