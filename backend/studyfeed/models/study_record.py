from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from studyfeed.db import Base, new_id, utcnow


class StudyRecord(Base):
    __tablename__ = "study_records"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)

    # Material name as typed/selected; matched against materials.name by
    # exact string equality, not a foreign key.
    subject = Column(String, nullable=False)

    duration = Column(Integer, nullable=False)  # minutes

    # Calendar string as entered by the client, e.g. '2025年01月05日 14:30'
    date = Column(String, nullable=False)
    notes = Column(Text, nullable=False, default="")

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    comments = relationship(
        "Comment",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
