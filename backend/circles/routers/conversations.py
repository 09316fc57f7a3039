import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from circles.database import get_db
from circles.models.conversation import Conversation
from circles.models.user import User
from circles.schemas.conversation import ConversationCreate, ConversationResponse
from circles.services.attention import as_utc, get_now
from circles.services.auth import get_current_user_required
from circles.services.contacts import get_user_contact

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=List[ConversationResponse])
def list_conversations(
    contact_id: Optional[str] = Query(None, description="Filter by contact ID"),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """List conversations, newest first."""
    query = db.query(Conversation).filter(Conversation.user_id == user.id)

    if contact_id:
        query = query.filter(Conversation.contact_id == contact_id)

    conversations = query.order_by(Conversation.occurred_at.desc()).limit(limit).all()
    return [ConversationResponse.model_validate(c) for c in conversations]


@router.get("/{conversation_id}", response_model=ConversationResponse)
def get_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Get a specific conversation by ID."""
    conversation = db.query(Conversation).filter(
        Conversation.id == conversation_id,
        Conversation.user_id == user.id,
    ).first()
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return ConversationResponse.model_validate(conversation)


@router.post("", response_model=ConversationResponse, status_code=201)
def create_conversation(
    conversation_data: ConversationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Log a conversation and move the contact's last contact date to it.

    Both writes share one commit.
    """
    contact = get_user_contact(db, user, conversation_data.contact_id)

    conversation = Conversation(**conversation_data.model_dump(exclude={"occurred_at"}))
    conversation.type = conversation_data.type.value
    conversation.user_id = user.id
    conversation.occurred_at = as_utc(conversation_data.occurred_at or now)
    db.add(conversation)

    contact.last_contact_at = conversation.occurred_at

    db.commit()
    db.refresh(conversation)
    logger.info(f"Logged {conversation.type} with contact {contact.id}")
    return ConversationResponse.model_validate(conversation)


@router.delete("/{conversation_id}", status_code=204)
def delete_conversation(
    conversation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Delete a conversation. The contact's last contact date is left as is."""
    conversation = db.query(Conversation).filter(
        Conversation.id == conversation_id,
        Conversation.user_id == user.id,
    ).first()
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")

    db.delete(conversation)
    db.commit()
