"""API routes for AI message drafting, contact search and voice notes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from circles.database import get_db
from circles.models.user import User
from circles.schemas.ai import (
    AudioRequest,
    AudioResponse,
    ContactSearchRequest,
    ContactSearchResponse,
    GenerateMessageRequest,
    GenerateMessageResponse,
)
from circles.services.ai_gateway import AIGateway, AIGatewayError, get_ai_gateway
from circles.services.auth import get_current_user_required
from circles.services.contacts import user_contacts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate-message", response_model=GenerateMessageResponse)
async def generate_message(
    request: GenerateMessageRequest,
    user: User = Depends(get_current_user_required),
    ai: AIGateway = Depends(get_ai_gateway),
):
    """Draft a short message to a contact, toned for their layer."""
    try:
        message = await ai.generate_message(
            contact_name=request.contact_name,
            contact_layer=request.contact_layer.value,
            opportunity_type=request.opportunity_type,
            title=request.title,
            description=request.description,
        )
    except AIGatewayError as e:
        logger.error(f"Error generating message: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return GenerateMessageResponse(message=message)


@router.post("/search-contacts", response_model=ContactSearchResponse)
async def search_contacts(
    request: ContactSearchRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    ai: AIGateway = Depends(get_ai_gateway),
):
    """Find contacts matching a free-text description."""
    profiles = [
        {
            "id": c.id,
            "name": c.name,
            "company": c.company,
            "role": c.role,
            "email": c.email,
            "notes": c.notes,
            "tags": c.tags,
            "layer": c.layer,
        }
        for c in user_contacts(db, user)
    ]

    try:
        result = await ai.search_contacts(request.query, profiles)
    except AIGatewayError as e:
        logger.error(f"Error in contact search: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return ContactSearchResponse(**result)


@router.post("/audio", response_model=AudioResponse)
async def process_audio(
    request: AudioRequest,
    user: User = Depends(get_current_user_required),
    ai: AIGateway = Depends(get_ai_gateway),
):
    """Transcribe a recorded voice note or summarize note text."""
    if request.action not in ("transcribe", "summarize"):
        raise HTTPException(status_code=400, detail="Invalid action")

    try:
        if request.action == "summarize":
            if not request.text:
                raise HTTPException(status_code=400, detail="text is required for summarize")
            return AudioResponse(summary=await ai.summarize(request.text))

        if not request.audio:
            raise HTTPException(status_code=400, detail="audio is required for transcribe")
        return AudioResponse(transcription=await ai.transcribe(request.audio, request.audio_format))
    except AIGatewayError as e:
        logger.error(f"Error processing audio request: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
