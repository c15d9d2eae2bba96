from sqlalchemy import Column, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from studyfeed.db import Base, new_id, utcnow


class Follow(Base):
    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    follower_id = Column(String(36), nullable=False, index=True)
    following_id = Column(String(36), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
