from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from circles.models.contact import RelationshipLayer, ContactFrequency


class FamilyMember(BaseModel):
    name: str
    relationship: str
    birthday: Optional[date] = None


class ContactBase(BaseModel):
    name: str = Field(..., min_length=1)
    layer: RelationshipLayer = RelationshipLayer.REGULAR
    contact_frequency: ContactFrequency = ContactFrequency.MONTHLY
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    birthday: Optional[date] = None
    family_members: List[FamilyMember] = []


class ContactCreate(ContactBase):
    initials: Optional[str] = None
    last_contact_at: Optional[datetime] = None


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    initials: Optional[str] = None
    layer: Optional[RelationshipLayer] = None
    contact_frequency: Optional[ContactFrequency] = None
    last_contact_at: Optional[datetime] = None
    avatar_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    birthday: Optional[date] = None
    family_members: Optional[List[FamilyMember]] = None


class ContactResponse(ContactBase):
    id: str
    initials: str
    last_contact_at: Optional[datetime] = None
    needs_attention: bool
    effective_layer: RelationshipLayer
    days_since_contact: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ContactList(BaseModel):
    contacts: List[ContactResponse]
    total: int
    needs_attention_count: int
