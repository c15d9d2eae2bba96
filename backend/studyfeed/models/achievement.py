from sqlalchemy import Column, String, Date, DateTime, Text
from sqlalchemy.sql import func
from studyfeed.db import Base, new_id, utcnow


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    achievement_date = Column(Date, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
