import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from circles.database import Base
from circles.models.contact import new_id


class OpportunityType(str, enum.Enum):
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    FOLLOW_UP = "follow_up"
    EVENT = "event"
    MILESTONE = "milestone"
    CHECK_IN = "check_in"
    MANUAL = "manual"


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Opportunity(Base):
    __tablename__ = "opportunities"

    id = Column(String(36), primary_key=True, default=new_id)
    contact_id = Column(String(36), ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default=OpportunityType.MANUAL.value)
    due_date = Column(DateTime(timezone=True), nullable=True, index=True)
    priority = Column(String(10), nullable=False, default=Priority.MEDIUM.value)

    is_completed = Column(Boolean, default=False, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    suggested_message = Column(Text, nullable=True)

    is_recurring = Column(Boolean, default=False)
    recurrence_pattern = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    contact = relationship("Contact", back_populates="opportunities")
