from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from circles.models.opportunity import OpportunityType, Priority
from circles.models.contact import RelationshipLayer


class OpportunityContact(BaseModel):
    """Minimal contact info embedded in opportunity responses."""
    id: str
    name: str
    initials: str
    layer: RelationshipLayer

    class Config:
        from_attributes = True


class OpportunityBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: OpportunityType = OpportunityType.MANUAL
    due_date: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    suggested_message: Optional[str] = None
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None


class OpportunityCreate(OpportunityBase):
    contact_id: str


class OpportunityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[OpportunityType] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    suggested_message: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurrence_pattern: Optional[str] = None


class OpportunityResponse(OpportunityBase):
    id: str
    contact_id: str
    is_completed: bool
    completed_at: Optional[datetime] = None
    contact: Optional[OpportunityContact] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SeedRequest(BaseModel):
    contact_ids: Optional[List[str]] = None


class SeedResponse(BaseModel):
    created: int
