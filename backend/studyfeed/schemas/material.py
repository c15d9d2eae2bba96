from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MaterialRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    image: Optional[str] = None
    created_at: datetime
