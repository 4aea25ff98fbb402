from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, CheckConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.types import UTCDateTime

class User(Base):
    """System users with role-based access control"""
    __tablename__ = 'users'
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), comment="Managed by the auth provider")
    role = Column(String(20), nullable=False, default='employee', index=True, comment="employee|supervisor|admin")
    created_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
    
    # Relationships
    runs = relationship("CheckRun", foreign_keys="CheckRun.employee_id", back_populates="employee")
    reviewed_runs = relationship("CheckRun", foreign_keys="CheckRun.reviewed_by", back_populates="reviewer")

    __table_args__ = (
        CheckConstraint("role IN ('employee', 'supervisor', 'admin')", name='check_user_role'),
    )
    
    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
