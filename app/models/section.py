from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Boolean,
)
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.types import UTCDateTime


class Section(Base):
    """Named grouping of checklist items (usually a physical area)"""
    __tablename__ = 'sections'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    items = relationship("CheckItem", back_populates="section")
    runs = relationship("CheckRun", back_populates="section")

    def __repr__(self):
        return f"<Section(id={self.id}, name='{self.name}', active={self.is_active})>"
