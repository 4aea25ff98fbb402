from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, ForeignKey, Index,
)
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.types import UTCDateTime


class CheckItem(Base):
    """Single checklist question within a section, with requirement flags"""
    __tablename__ = 'check_items'

    id = Column(Integer, primary_key=True, autoincrement=True)
    section_id = Column(Integer, ForeignKey('sections.id', ondelete='RESTRICT'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    instructions = Column(Text)
    requires_photo = Column(Boolean, nullable=False, default=False)
    requires_note_on_fail = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    section = relationship("Section", back_populates="items")
    entries = relationship("CheckEntry", back_populates="item")

    __table_args__ = (
        Index('idx_check_items_section_order', 'section_id', 'sort_order', 'id'),
    )

    def __repr__(self):
        return f"<CheckItem(id={self.id}, section_id={self.section_id}, title='{self.title}')>"
