from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from studyfeed.db import Base, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    # Same value as the authenticated user id
    id = Column(String(36), primary_key=True)

    display_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)

    gender = Column(String, nullable=True)
    birth_year = Column(String, nullable=True)
    birthday = Column(String, nullable=True)
    prefecture = Column(String, nullable=True)
    grade = Column(String, nullable=True)
    high_school = Column(String, nullable=True)
    university = Column(String, nullable=True)
    follower_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
