"""Sample opportunities for a fresh account."""

import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from circles.models.opportunity import Opportunity, OpportunityType, Priority
from circles.models.user import User

logger = logging.getLogger(__name__)

SAMPLE_OPPORTUNITIES = [
    {"title": "Sarah's Birthday", "type": OpportunityType.BIRTHDAY, "priority": Priority.HIGH, "days_from_now": -2},
    {"title": "Follow up on investment opportunity", "type": OpportunityType.FOLLOW_UP, "priority": Priority.HIGH, "days_from_now": 0, "description": "Discuss the Series B terms"},
    {"title": "Work anniversary congratulations", "type": OpportunityType.MILESTONE, "priority": Priority.MEDIUM, "days_from_now": 1, "description": "5 years at the company"},
    {"title": "Quarterly check-in", "type": OpportunityType.CHECK_IN, "priority": Priority.MEDIUM, "days_from_now": -1},
    {"title": "Kid's graduation party invite", "type": OpportunityType.MILESTONE, "priority": Priority.HIGH, "days_from_now": 0, "description": "Emma's high school graduation"},
    {"title": "Book recommendation follow-up", "type": OpportunityType.FOLLOW_UP, "priority": Priority.LOW, "days_from_now": -3, "description": "Ask how they liked 'Thinking Fast and Slow'"},
    {"title": "New job congratulations", "type": OpportunityType.MILESTONE, "priority": Priority.HIGH, "days_from_now": 0, "description": "Just became VP of Engineering"},
    {"title": "Wedding anniversary", "type": OpportunityType.MILESTONE, "priority": Priority.MEDIUM, "days_from_now": 1},
    {"title": "Catch up over coffee", "type": OpportunityType.CHECK_IN, "priority": Priority.MEDIUM, "days_from_now": -4, "description": "Haven't seen in 3 months"},
    {"title": "Conference introduction", "type": OpportunityType.MANUAL, "priority": Priority.HIGH, "days_from_now": 0, "description": "Introduce to potential investor at TechCrunch"},
    {"title": "Baby shower gift", "type": OpportunityType.MILESTONE, "priority": Priority.MEDIUM, "days_from_now": 1},
]


def seed_sample_opportunities(db: Session, user: User, contact_ids: List[str], now: datetime) -> int:
    """Spread the sample opportunities round-robin over the given contacts."""
    if not contact_ids:
        raise ValueError("No contacts available to assign opportunities")

    for index, sample in enumerate(SAMPLE_OPPORTUNITIES):
        db.add(Opportunity(
            user_id=user.id,
            contact_id=contact_ids[index % len(contact_ids)],
            title=sample["title"],
            description=sample.get("description"),
            type=sample["type"].value,
            priority=sample["priority"].value,
            due_date=now + timedelta(days=sample["days_from_now"]),
            is_completed=False,
        ))

    db.commit()
    logger.info(f"Seeded {len(SAMPLE_OPPORTUNITIES)} sample opportunities for user {user.id}")
    return len(SAMPLE_OPPORTUNITIES)
