from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from circles.models.conversation import ConversationType


class ConversationBase(BaseModel):
    type: ConversationType = ConversationType.NOTE
    title: Optional[str] = None
    content: str = Field(..., min_length=1)
    summary: Optional[str] = None
    action_items: Optional[List[str]] = None


class ConversationCreate(ConversationBase):
    contact_id: str
    occurred_at: Optional[datetime] = None


class ConversationResponse(ConversationBase):
    id: str
    contact_id: str
    occurred_at: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
