import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_

from circles.database import get_db
from circles.models.contact import Contact, RelationshipLayer
from circles.models.user import User
from circles.schemas.contact import ContactCreate, ContactUpdate, ContactResponse, ContactList
from circles.services.attention import as_utc, get_now
from circles.services.auth import get_current_user_required
from circles.services.contacts import (
    build_contact_response,
    generate_initials,
    get_user_contact,
)
from circles.services.view_state import NetworkViewState, get_view_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])

# Columns that cannot be cleared; a null in an update leaves them unchanged
NON_NULLABLE_FIELDS = ("name", "initials", "layer", "contact_frequency")


@router.get("", response_model=ContactList)
def list_contacts(
    layer: Optional[RelationshipLayer] = None,
    needs_attention: Optional[bool] = Query(None, description="Only contacts that do (or do not) need attention"),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """List the user's contacts ordered by name."""
    query = db.query(Contact).filter(Contact.user_id == user.id)

    if layer:
        query = query.filter(Contact.layer == layer.value)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Contact.name.ilike(search_term),
                Contact.company.ilike(search_term),
                Contact.role.ilike(search_term),
                Contact.email.ilike(search_term),
                Contact.notes.ilike(search_term),
            )
        )

    # needs_attention is derived, so it is filtered after loading
    responses = [build_contact_response(c, now) for c in query.order_by(Contact.name).all()]
    attention_count = sum(1 for r in responses if r.needs_attention)
    if needs_attention is not None:
        responses = [r for r in responses if r.needs_attention == needs_attention]

    return ContactList(
        contacts=responses,
        total=len(responses),
        needs_attention_count=attention_count,
    )


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact(
    contact_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Get a specific contact by ID."""
    return build_contact_response(get_user_contact(db, user, contact_id), now)


@router.post("", response_model=ContactResponse, status_code=201)
def create_contact(
    contact_data: ContactCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Create a new contact."""
    data = contact_data.model_dump(mode="json", exclude={"last_contact_at", "birthday"})
    contact = Contact(**data)
    contact.user_id = user.id
    contact.birthday = contact_data.birthday
    if contact_data.last_contact_at is not None:
        contact.last_contact_at = as_utc(contact_data.last_contact_at)
    contact.initials = contact_data.initials or generate_initials(contact_data.name)

    db.add(contact)
    db.commit()
    db.refresh(contact)
    logger.info(f"Created contact {contact.id} ({contact.layer}) for user {user.id}")

    return build_contact_response(contact, now)


@router.put("/{contact_id}", response_model=ContactResponse)
def update_contact(
    contact_id: str,
    contact_data: ContactUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Update an existing contact."""
    contact = get_user_contact(db, user, contact_id)

    update_data = {
        field: value
        for field, value in contact_data.model_dump(exclude_unset=True).items()
        if value is not None or field not in NON_NULLABLE_FIELDS
    }
    json_data = contact_data.model_dump(mode="json", exclude_unset=True)
    if update_data.get("last_contact_at") is not None:
        update_data["last_contact_at"] = as_utc(update_data["last_contact_at"])
    for field in update_data:
        if field in ("family_members", "layer", "contact_frequency"):
            setattr(contact, field, json_data[field])
        else:
            setattr(contact, field, update_data[field])

    if "name" in update_data and "initials" not in update_data:
        contact.initials = generate_initials(contact.name)

    db.commit()
    db.refresh(contact)
    return build_contact_response(contact, now)


@router.delete("/{contact_id}", status_code=204)
def delete_contact(
    contact_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    view_state: NetworkViewState = Depends(get_view_state),
):
    """Delete a contact along with its conversations and opportunities."""
    contact = get_user_contact(db, user, contact_id)
    opportunity_ids = [o.id for o in contact.opportunities]

    db.delete(contact)
    db.commit()
    view_state.forget_contact(contact_id, opportunity_ids)
    logger.info(f"Deleted contact {contact_id} for user {user.id}")
