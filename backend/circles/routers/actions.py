"""Action overview: what to do today and what's coming up."""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from circles.database import get_db
from circles.models.opportunity import Opportunity
from circles.models.user import User
from circles.schemas.network import ActionItemResponse, ActionOverviewResponse
from circles.services.actions import build_overview
from circles.services.attention import get_now
from circles.services.auth import get_current_user_required
from circles.services.contacts import contact_needs_attention, user_contacts
from circles.services.view_state import NetworkViewState, get_view_state

router = APIRouter(prefix="/actions", tags=["actions"])


@router.get("", response_model=ActionOverviewResponse)
def get_actions(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    view_state: NetworkViewState = Depends(get_view_state),
    now: datetime = Depends(get_now),
):
    """Open opportunities and reconnect reminders, most urgent first."""
    opportunities = db.query(Opportunity).options(joinedload(Opportunity.contact)).filter(
        Opportunity.user_id == user.id,
        Opportunity.is_completed == False,
    ).order_by(Opportunity.due_date.asc()).all()
    attention = [c for c in user_contacts(db, user) if contact_needs_attention(c, now)]

    overview = build_overview(opportunities, attention, now, view_state.dismissed())

    def convert(items):
        return [ActionItemResponse.model_validate(item) for item in items]

    return ActionOverviewResponse(
        items=convert(overview.items),
        today=convert(overview.today),
        upcoming=convert(overview.upcoming),
        today_count=overview.today_count,
        total_count=overview.total_count,
    )


@router.post("/{item_id}/dismiss", status_code=204)
def dismiss_action(
    item_id: str,
    view_state: NetworkViewState = Depends(get_view_state),
):
    """Hide an action item until restart. Nothing is stored."""
    view_state.dismiss(item_id)


@router.delete("/{item_id}/dismiss", status_code=204)
def restore_action(
    item_id: str,
    view_state: NetworkViewState = Depends(get_view_state),
):
    """Show a dismissed action item again."""
    view_state.restore(item_id)
