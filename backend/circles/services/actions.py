"""Action overview: open opportunities plus reconnect reminders, by urgency."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Set

from circles.models.contact import Contact
from circles.models.opportunity import Opportunity, Priority
from circles.services.attention import as_utc, reminder_due_date
from circles.services.layers import priority_for_layer

REMINDER_PREFIX = "reminder-"
NO_DATE_ORDER = 999


@dataclass
class ActionItem:
    id: str
    type: str  # "opportunity" or "contact-reminder"
    title: str
    contact_id: str
    contact_name: str
    contact_layer: str
    priority: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    suggested_message: Optional[str] = None
    opportunity_id: Optional[str] = None
    opportunity_type: Optional[str] = None
    is_overdue: bool = False
    urgency: str = "No date"
    urgency_order: int = NO_DATE_ORDER


@dataclass
class ActionOverview:
    items: List[ActionItem] = field(default_factory=list)
    today: List[ActionItem] = field(default_factory=list)
    upcoming: List[ActionItem] = field(default_factory=list)

    @property
    def today_count(self) -> int:
        return len(self.today)

    @property
    def total_count(self) -> int:
        return len(self.items)


def _week_start(day: date) -> date:
    # Weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def is_today(value: datetime, now: datetime) -> bool:
    return as_utc(value).date() == as_utc(now).date()


def is_tomorrow(value: datetime, now: datetime) -> bool:
    return as_utc(value).date() == as_utc(now).date() + timedelta(days=1)


def is_this_week(value: datetime, now: datetime) -> bool:
    return _week_start(as_utc(value).date()) == _week_start(as_utc(now).date())


def is_past(value: datetime, now: datetime) -> bool:
    return as_utc(value) < as_utc(now)


def urgency_label(due: Optional[datetime], now: datetime) -> str:
    if due is None:
        return "No date"
    if is_past(due, now) and not is_today(due, now):
        return "Overdue"
    if is_today(due, now):
        return "Today"
    if is_tomorrow(due, now):
        return "Tomorrow"
    if is_this_week(due, now):
        return "This week"
    due = as_utc(due)
    return f"{due:%b} {due.day}"


def urgency_order(due: Optional[datetime], now: datetime) -> int:
    if due is None:
        return NO_DATE_ORDER
    if is_past(due, now) and not is_today(due, now):
        return 0
    if is_today(due, now):
        return 1
    if is_tomorrow(due, now):
        return 2
    if is_this_week(due, now):
        return 3
    return 4 + (as_utc(due) - as_utc(now)).days


def _opportunity_item(opp: Opportunity, now: datetime) -> ActionItem:
    due = as_utc(opp.due_date) if opp.due_date else None
    return ActionItem(
        id=opp.id,
        type="opportunity",
        title=opp.title,
        description=opp.description or None,
        contact_id=opp.contact.id,
        contact_name=opp.contact.name,
        contact_layer=opp.contact.layer,
        due_date=due,
        priority=opp.priority or Priority.MEDIUM.value,
        suggested_message=opp.suggested_message or None,
        opportunity_id=opp.id,
        opportunity_type=opp.type,
        is_overdue=bool(due) and is_past(due, now) and not is_today(due, now),
    )


def _reminder_item(contact: Contact, now: datetime) -> ActionItem:
    due = reminder_due_date(contact.last_contact_at, contact.contact_frequency)
    if contact.last_contact_at:
        last = as_utc(contact.last_contact_at)
        description = f"Last contact: {last:%b} {last.day}, {last.year}"
    else:
        description = "Never contacted"
    return ActionItem(
        id=f"{REMINDER_PREFIX}{contact.id}",
        type="contact-reminder",
        title=f"Reach out to {contact.name}",
        description=description,
        contact_id=contact.id,
        contact_name=contact.name,
        contact_layer=contact.layer,
        due_date=due,
        priority=priority_for_layer(contact.layer).value,
        is_overdue=is_past(due, now) if due else True,
    )


def build_overview(
    opportunities: Iterable[Opportunity],
    attention_contacts: Iterable[Contact],
    now: datetime,
    dismissed: Optional[Set[str]] = None,
) -> ActionOverview:
    """Merge open opportunities and reminders for contacts needing attention.

    A reminder is skipped when the contact already has an opportunity due
    this week.
    """
    dismissed = dismissed or set()
    items: List[ActionItem] = []

    for opp in opportunities:
        if opp.is_completed:
            continue
        items.append(_opportunity_item(opp, now))

    for contact in attention_contacts:
        has_recent_opp = any(
            item.contact_id == contact.id and item.due_date and is_this_week(item.due_date, now)
            for item in items
        )
        if not has_recent_opp:
            items.append(_reminder_item(contact, now))

    items = [item for item in items if item.id not in dismissed]
    for item in items:
        item.urgency = urgency_label(item.due_date, now)
        item.urgency_order = urgency_order(item.due_date, now)
    # sorted() is stable, so equal urgencies keep insertion order
    items = sorted(items, key=lambda item: item.urgency_order)

    overview = ActionOverview(items=items)
    for item in items:
        if item.due_date is None:
            continue
        if is_today(item.due_date, now) or is_past(item.due_date, now):
            overview.today.append(item)
        else:
            overview.upcoming.append(item)
    return overview
