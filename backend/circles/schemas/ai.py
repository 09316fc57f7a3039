from pydantic import BaseModel, Field
from typing import Optional, List
from circles.models.contact import RelationshipLayer


class GenerateMessageRequest(BaseModel):
    contact_name: str
    contact_layer: RelationshipLayer = RelationshipLayer.REGULAR
    opportunity_type: str = "manual"
    title: str
    description: Optional[str] = None


class GenerateMessageResponse(BaseModel):
    message: str


class ContactSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)


class ContactSearchResponse(BaseModel):
    matched_ids: List[str]
    message: str


class AudioRequest(BaseModel):
    action: str  # "transcribe" or "summarize"
    audio: Optional[str] = None  # base64 encoded
    audio_format: str = "webm"
    text: Optional[str] = None


class AudioResponse(BaseModel):
    transcription: Optional[str] = None
    summary: Optional[str] = None
