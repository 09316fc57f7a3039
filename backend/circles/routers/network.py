"""Relationship network: ring layout and drag overrides."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from circles.database import get_db
from circles.models.user import User
from circles.schemas.network import (
    AngleOverride,
    NetworkLayout,
    PositionedContactResponse,
    RingInfo,
)
from circles.services.attention import get_now
from circles.services.auth import get_current_user_required
from circles.services.contacts import contact_needs_attention, get_user_contact, user_contacts
from circles.services.layers import LAYER_CONFIG, LAYER_ORDER
from circles.services.layout import LayoutNode, layout, ring_bounds
from circles.services.view_state import NetworkViewState, get_view_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/network", tags=["network"])


@router.get("/layout", response_model=NetworkLayout)
def get_layout(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    view_state: NetworkViewState = Depends(get_view_state),
    now: datetime = Depends(get_now),
):
    """Position every contact on the rings around the user."""
    contacts = user_contacts(db, user)
    by_id = {c.id: c for c in contacts}
    overrides = view_state.angle_overrides()

    nodes = [
        LayoutNode(
            contact_id=c.id,
            layer=c.layer,
            needs_attention=contact_needs_attention(c, now),
        )
        for c in contacts
    ]
    positioned = layout(nodes, overrides)

    counts = {layer: 0 for layer in LAYER_ORDER}
    for p in positioned:
        counts[p.effective_layer] += 1

    rings = []
    for layer in LAYER_ORDER:
        inner, outer = ring_bounds(layer)
        rings.append(RingInfo(
            layer=layer,
            label=LAYER_CONFIG[layer]["label"],
            description=LAYER_CONFIG[layer]["description"],
            inner_radius=inner,
            outer_radius=outer,
            contact_count=counts[layer],
        ))

    return NetworkLayout(
        rings=rings,
        contacts=[
            PositionedContactResponse(
                name=by_id[p.contact_id].name,
                initials=by_id[p.contact_id].initials,
                pinned=p.contact_id in overrides,
                **p.to_dict(),
            )
            for p in positioned
        ],
        needs_attention_count=sum(1 for n in nodes if n.needs_attention),
    )


@router.put("/positions/{contact_id}", status_code=204)
def set_position(
    contact_id: str,
    override: AngleOverride,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user_required),
    view_state: NetworkViewState = Depends(get_view_state),
):
    """Remember the angle a contact was dragged to (in memory only)."""
    get_user_contact(db, user, contact_id)
    view_state.set_angle(contact_id, override.angle)


@router.delete("/positions/{contact_id}", status_code=204)
def reset_position(
    contact_id: str,
    view_state: NetworkViewState = Depends(get_view_state),
):
    """Forget a drag override so the hashed default angle applies again."""
    if not view_state.clear_angle(contact_id):
        raise HTTPException(status_code=404, detail="No position override for contact")
