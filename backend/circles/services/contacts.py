"""Helpers shared by the routers that read contacts."""

from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from circles.models.contact import Contact
from circles.models.user import User
from circles.schemas.contact import ContactResponse
from circles.services.attention import days_since_contact, needs_attention
from circles.services.layers import effective_layer


def generate_initials(name: str) -> str:
    """First letters of the first two name parts, uppercased."""
    return "".join(part[0] for part in name.split() if part).upper()[:2]


def user_contacts(db: Session, user: User) -> List[Contact]:
    return db.query(Contact).filter(Contact.user_id == user.id).order_by(Contact.name).all()


def get_user_contact(db: Session, user: User, contact_id: str) -> Contact:
    """Fetch a contact owned by the user or raise 404."""
    contact = db.query(Contact).filter(
        Contact.id == contact_id,
        Contact.user_id == user.id,
    ).first()
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


def contact_needs_attention(contact: Contact, now: datetime) -> bool:
    return needs_attention(contact.last_contact_at, contact.contact_frequency, now)


def build_contact_response(contact: Contact, now: datetime) -> ContactResponse:
    attention = contact_needs_attention(contact, now)
    days: Optional[int] = None
    if contact.last_contact_at is not None:
        days = days_since_contact(contact.last_contact_at, now)

    return ContactResponse(
        id=contact.id,
        name=contact.name,
        initials=contact.initials,
        layer=contact.layer,
        contact_frequency=contact.contact_frequency,
        last_contact_at=contact.last_contact_at,
        avatar_url=contact.avatar_url,
        email=contact.email,
        phone=contact.phone,
        company=contact.company,
        role=contact.role,
        notes=contact.notes,
        tags=contact.tags,
        birthday=contact.birthday,
        family_members=contact.family_members or [],
        needs_attention=attention,
        effective_layer=effective_layer(contact.layer, attention),
        days_since_contact=days,
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )
