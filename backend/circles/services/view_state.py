"""Per-user ephemeral view state.

Dragged node angles and dismissed reminders live only in memory. They are
never written to the database and disappear on restart.
"""

import threading
import logging
from typing import Dict, Iterable, Set

from fastapi import Depends, Request

from circles.models.user import User
from circles.services.auth import get_current_user_required

logger = logging.getLogger(__name__)


class NetworkViewState:

    def __init__(self):
        self._lock = threading.Lock()
        self._angles: Dict[str, float] = {}
        self._dismissed: Set[str] = set()

    def set_angle(self, contact_id: str, angle: float) -> None:
        with self._lock:
            self._angles[contact_id] = angle

    def clear_angle(self, contact_id: str) -> bool:
        """Drop a drag override. Returns False if there was none."""
        with self._lock:
            return self._angles.pop(contact_id, None) is not None

    def angle_overrides(self) -> Dict[str, float]:
        with self._lock:
            return dict(self._angles)

    def dismiss(self, item_id: str) -> None:
        with self._lock:
            self._dismissed.add(item_id)

    def restore(self, item_id: str) -> None:
        with self._lock:
            self._dismissed.discard(item_id)

    def dismissed(self) -> Set[str]:
        with self._lock:
            return set(self._dismissed)

    def forget_contact(self, contact_id: str, opportunity_ids: Iterable[str] = ()) -> None:
        """Remove state that refers to a deleted contact and its opportunities."""
        with self._lock:
            self._angles.pop(contact_id, None)
            self._dismissed.discard(f"reminder-{contact_id}")
            self._dismissed.difference_update(opportunity_ids)


class ViewStateRegistry:
    """Hands out one NetworkViewState per user id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._states: Dict[int, NetworkViewState] = {}

    def for_user(self, user_id: int) -> NetworkViewState:
        with self._lock:
            state = self._states.get(user_id)
            if state is None:
                logger.debug(f"Creating view state for user {user_id}")
                state = NetworkViewState()
                self._states[user_id] = state
            return state

    def reset(self) -> None:
        with self._lock:
            self._states.clear()


def get_view_state(
    request: Request,
    user: User = Depends(get_current_user_required),
) -> NetworkViewState:
    """FastAPI dependency returning the current user's view state."""
    return request.app.state.view_states.for_user(user.id)
