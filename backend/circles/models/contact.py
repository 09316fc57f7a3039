import enum
import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, Date, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from circles.database import Base


class RelationshipLayer(str, enum.Enum):
    VIP = "vip"
    INNER = "inner"
    REGULAR = "regular"
    OCCASIONAL = "occasional"
    DISTANT = "distant"


class ContactFrequency(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


def new_id() -> str:
    return str(uuid.uuid4())


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    initials = Column(String(10), nullable=False)
    avatar_url = Column(String(500), nullable=True)

    layer = Column(String(20), nullable=False, default=RelationshipLayer.REGULAR.value, index=True)
    contact_frequency = Column(String(20), nullable=False, default=ContactFrequency.MONTHLY.value)
    last_contact_at = Column(DateTime(timezone=True), nullable=True)

    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    company = Column(String(200), nullable=True)
    role = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)  # List of strings
    birthday = Column(Date, nullable=True)
    family_members = Column(JSON, nullable=True, default=list)  # [{name, relationship, birthday}]

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="contacts")
    conversations = relationship(
        "Conversation", back_populates="contact", cascade="all, delete-orphan"
    )
    opportunities = relationship(
        "Opportunity", back_populates="contact", cascade="all, delete-orphan"
    )
