
from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Text, ForeignKey, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.types import UTCDateTime


class CheckRun(Base):
    """One employee's pass through a section's checklist"""
    __tablename__ = 'check_runs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)
    section_id = Column(Integer, ForeignKey('sections.id', ondelete='RESTRICT'), nullable=False, index=True)
    status = Column(String(20), nullable=False, default='in_progress', index=True, comment="in_progress|submitted|reviewed")
    started_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    submitted_at = Column(UTCDateTime)
    reviewed_at = Column(UTCDateTime)
    reviewed_by = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), index=True)
    review_note = Column(Text)

    # Relationships
    employee = relationship("User", foreign_keys=[employee_id], back_populates="runs")
    reviewer = relationship("User", foreign_keys=[reviewed_by], back_populates="reviewed_runs")
    section = relationship("Section", back_populates="runs")
    entries = relationship("CheckEntry", back_populates="run")

    # Constraints
    __table_args__ = (
        CheckConstraint("status IN ('in_progress', 'submitted', 'reviewed')", name='check_run_status'),
        Index('idx_check_runs_owner_section', 'employee_id', 'section_id', 'status', 'started_at'),
    )

    def __repr__(self):
        return f"<CheckRun(id={self.id}, employee_id={self.employee_id}, status='{self.status}')>"
