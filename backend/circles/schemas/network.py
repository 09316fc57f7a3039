from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from circles.models.contact import RelationshipLayer


class RingInfo(BaseModel):
    layer: RelationshipLayer
    label: str
    description: str
    inner_radius: float
    outer_radius: float
    contact_count: int = 0


class PositionedContactResponse(BaseModel):
    contact_id: str
    name: str
    initials: str
    x: float
    y: float
    angle: float
    radius: float
    layer: RelationshipLayer
    effective_layer: RelationshipLayer
    needs_attention: bool
    drifting: bool
    pinned: bool = False


class NetworkLayout(BaseModel):
    rings: List[RingInfo]
    contacts: List[PositionedContactResponse]
    needs_attention_count: int


class AngleOverride(BaseModel):
    angle: float


class ActionItemResponse(BaseModel):
    id: str
    type: str
    title: str
    description: Optional[str] = None
    contact_id: str
    contact_name: str
    contact_layer: RelationshipLayer
    due_date: Optional[datetime] = None
    priority: str
    suggested_message: Optional[str] = None
    opportunity_id: Optional[str] = None
    opportunity_type: Optional[str] = None
    is_overdue: bool
    urgency: str

    class Config:
        from_attributes = True


class ActionOverviewResponse(BaseModel):
    items: List[ActionItemResponse]
    today: List[ActionItemResponse]
    upcoming: List[ActionItemResponse]
    today_count: int
    total_count: int
