"""Attention scoring for contacts.

A contact "needs attention" once 80% of its contact-frequency target has
elapsed since the last logged interaction, or when it has never been
contacted at all. Nothing here touches the database; every function takes
the current time explicitly so results are reproducible.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from circles.models.contact import ContactFrequency

# Canonical frequency table. There is intentionally no "daily" tier.
FREQUENCY_DAYS = {
    ContactFrequency.WEEKLY.value: 7,
    ContactFrequency.BIWEEKLY.value: 14,
    ContactFrequency.MONTHLY.value: 30,
    ContactFrequency.QUARTERLY.value: 90,
    ContactFrequency.YEARLY.value: 365,
}

DEFAULT_TARGET_DAYS = 30
ATTENTION_RATIO = 0.8

SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_now() -> datetime:
    """FastAPI dependency for the request's notion of "now"."""
    return utc_now()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def target_days(frequency) -> int:
    """Target number of days between contacts for a frequency tag."""
    key = frequency.value if isinstance(frequency, ContactFrequency) else frequency
    return FREQUENCY_DAYS.get(key, DEFAULT_TARGET_DAYS)


def days_since_contact(last_contact_at: datetime, now: datetime) -> int:
    """Whole days elapsed since last contact, floored."""
    elapsed = (as_utc(now) - as_utc(last_contact_at)).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY)


def needs_attention(
    last_contact_at: Optional[datetime],
    frequency,
    now: datetime,
) -> bool:
    if last_contact_at is None:
        return True
    return days_since_contact(last_contact_at, now) >= ATTENTION_RATIO * target_days(frequency)


def reminder_due_date(last_contact_at: Optional[datetime], frequency) -> Optional[datetime]:
    """When the next contact is fully due, or None for never-contacted contacts."""
    if last_contact_at is None:
        return None
    return as_utc(last_contact_at) + timedelta(days=target_days(frequency))
