import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from circles.database import get_db
from circles.models.contact import Contact
from circles.models.opportunity import Opportunity
from circles.models.user import User
from circles.schemas.opportunity import (
    OpportunityCreate,
    OpportunityUpdate,
    OpportunityResponse,
    SeedRequest,
    SeedResponse,
)
from circles.services.ai_gateway import AIGateway, AIGatewayError, get_ai_gateway
from circles.services.attention import get_now
from circles.services.auth import get_current_user_required
from circles.services.contacts import get_user_contact
from circles.services.seed import seed_sample_opportunities

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/opportunities", tags=["opportunities"])

# A null in an update leaves these unchanged
NON_NULLABLE_FIELDS = ("title", "type", "priority", "is_recurring")


def _get_user_opportunity(db: Session, user: User, opportunity_id: str) -> Opportunity:
    opportunity = db.query(Opportunity).options(joinedload(Opportunity.contact)).filter(
        Opportunity.id == opportunity_id,
        Opportunity.user_id == user.id,
    ).first()
    if not opportunity:
        raise HTTPException(status_code=404, detail="Opportunity not found")
    return opportunity


@router.get("", response_model=List[OpportunityResponse])
def list_opportunities(
    contact_id: Optional[str] = Query(None, description="Filter by contact ID"),
    include_completed: bool = True,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """List opportunities with their contact, soonest due first."""
    query = db.query(Opportunity).options(joinedload(Opportunity.contact)).filter(
        Opportunity.user_id == user.id
    )

    if contact_id:
        query = query.filter(Opportunity.contact_id == contact_id)

    if not include_completed:
        query = query.filter(Opportunity.is_completed == False)

    opportunities = query.order_by(Opportunity.due_date.asc()).all()
    return [OpportunityResponse.model_validate(o) for o in opportunities]


@router.get("/{opportunity_id}", response_model=OpportunityResponse)
def get_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Get a specific opportunity by ID."""
    return OpportunityResponse.model_validate(_get_user_opportunity(db, user, opportunity_id))


@router.post("", response_model=OpportunityResponse, status_code=201)
def create_opportunity(
    opportunity_data: OpportunityCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Create a new opportunity for one of the user's contacts."""
    get_user_contact(db, user, opportunity_data.contact_id)

    data = opportunity_data.model_dump()
    data["type"] = opportunity_data.type.value
    data["priority"] = opportunity_data.priority.value
    opportunity = Opportunity(**data, user_id=user.id, is_completed=False)
    db.add(opportunity)
    db.commit()
    db.refresh(opportunity)
    return OpportunityResponse.model_validate(opportunity)


@router.put("/{opportunity_id}", response_model=OpportunityResponse)
def update_opportunity(
    opportunity_id: str,
    opportunity_data: OpportunityUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Update an opportunity."""
    opportunity = _get_user_opportunity(db, user, opportunity_id)

    update_data = opportunity_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        if field in ("type", "priority"):
            value = value.value
        setattr(opportunity, field, value)

    db.commit()
    db.refresh(opportunity)
    return OpportunityResponse.model_validate(opportunity)


@router.post("/{opportunity_id}/complete", response_model=OpportunityResponse)
def complete_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Mark an opportunity completed. Completion is terminal."""
    opportunity = _get_user_opportunity(db, user, opportunity_id)
    if opportunity.is_completed:
        raise HTTPException(status_code=409, detail="Opportunity already completed")

    opportunity.is_completed = True
    opportunity.completed_at = now
    db.commit()
    db.refresh(opportunity)
    return OpportunityResponse.model_validate(opportunity)


@router.post("/{opportunity_id}/suggest-message", response_model=OpportunityResponse)
async def suggest_message(
    opportunity_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    ai: AIGateway = Depends(get_ai_gateway),
):
    """Draft a message with the AI gateway and store it on the opportunity."""
    opportunity = _get_user_opportunity(db, user, opportunity_id)

    try:
        message = await ai.generate_message(
            contact_name=opportunity.contact.name,
            contact_layer=opportunity.contact.layer,
            opportunity_type=opportunity.type,
            title=opportunity.title,
            description=opportunity.description,
        )
    except AIGatewayError as e:
        logger.error(f"Message generation failed for opportunity {opportunity_id}: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))

    opportunity.suggested_message = message
    db.commit()
    db.refresh(opportunity)
    return OpportunityResponse.model_validate(opportunity)


@router.delete("/{opportunity_id}", status_code=204)
def delete_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
):
    """Delete an opportunity."""
    opportunity = _get_user_opportunity(db, user, opportunity_id)

    db.delete(opportunity)
    db.commit()


@router.post("/seed", response_model=SeedResponse, status_code=201)
def seed_opportunities(
    seed_data: SeedRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    now: datetime = Depends(get_now),
):
    """Add the sample opportunities, spread over the given (or all) contacts."""
    if seed_data.contact_ids:
        contact_ids = [get_user_contact(db, user, cid).id for cid in seed_data.contact_ids]
    else:
        rows = db.query(Contact.id).filter(Contact.user_id == user.id).order_by(Contact.name).all()
        contact_ids = [row[0] for row in rows]

    try:
        created = seed_sample_opportunities(db, user, contact_ids, now)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SeedResponse(created=created)
