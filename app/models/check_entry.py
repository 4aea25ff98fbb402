
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, ForeignKey,
    CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.types import UTCDateTime


class CheckEntry(Base):
    """Recorded result of one item within a run (one row per run+item)"""
    __tablename__ = 'check_entries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Integer, ForeignKey('check_runs.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey('check_items.id', ondelete='RESTRICT'), nullable=False, index=True)
    result = Column(String(10), nullable=False, comment="pass|fail|na")
    note = Column(Text)
    photo_url = Column(String(1000))
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc), comment="Touched on every upsert")

    # Relationships
    run = relationship("CheckRun", back_populates="entries")
    item = relationship("CheckItem", back_populates="entries")

    # Constraints
    __table_args__ = (
        UniqueConstraint('run_id', 'item_id', name='unique_run_item'),
        CheckConstraint("result IN ('pass', 'fail', 'na')", name='check_entry_result'),
    )

    def __repr__(self):
        return f"<CheckEntry(id={self.id}, run_id={self.run_id}, item_id={self.item_id}, result='{self.result}')>"
