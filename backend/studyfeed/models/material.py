from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from studyfeed.db import Base, new_id, utcnow


class Material(Base):
    __tablename__ = "materials"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False)

    # Not unique: lookups by name are best-effort
    name = Column(String, nullable=False, index=True)
    # Public storage URL, or a data: URL when the upload fell back inline
    image = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now())
