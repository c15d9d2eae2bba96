from pydantic import BaseModel


class FollowStatus(BaseModel):
    target_id: str
    following: bool
    follower_count: int
