from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from studyfeed.db import Base, new_id, utcnow


class TargetSchool(Base):
    __tablename__ = "target_schools"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)

    school_name = Column(String, nullable=False)
    faculty = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
