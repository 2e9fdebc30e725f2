# Day-keyed massive actions inside the calendar-events store.
#
# A "day event" groups the actions scheduled on one date:
#   {"id": "2025-04-15-a1", "date": "2025-04-15", "massiveActions": [{...}, ...]}

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from rpm_life.models.schemas import MassiveActionIn
from rpm_life.store.errors import NotFound
from rpm_life.store.repository import Repository, clean_payload, index_of, new_id

logger = logging.getLogger(__name__)


def _day_index(rows: List[Dict], date_key: str) -> Optional[int]:
    for i, ev in enumerate(rows):
        if isinstance(ev, dict) and ev.get("date") == date_key:
            return i
    return None


class CalendarDayService:
    def __init__(self, events: Repository):
        self.events = events

    def add_action(self, date_key: str, action: Any) -> Dict:
        """Schedule `action` on `date_key`; creates the day event if needed. Returns the day event."""
        if isinstance(action, dict):
            action_id = action.get("id") or new_id()
        else:
            action_id = None  # clean_payload rejects it below
        data = clean_payload(action, "Massive action", MassiveActionIn)
        data = {"id": action_id, **data}

        def _add(rows: List[Dict]) -> Dict:
            idx = _day_index(rows, date_key)
            if idx is None:
                day = {"id": f"{date_key}-{data['id']}", "date": date_key, "massiveActions": [data]}
                rows.append(day)
                return day
            day = rows[idx]
            actions = day.get("massiveActions")
            if not isinstance(actions, list):
                actions = day["massiveActions"] = []
            if index_of(actions, data["id"]) is None:
                actions.append(data)
            return day

        day = self.events.transact(_add)
        logger.info("Scheduled action %s on %s", data["id"], date_key)
        return day

    def remove_action(self, date_key: str, action_id: str) -> Dict[str, str]:
        def _remove(rows: List[Dict]) -> None:
            idx = _day_index(rows, date_key)
            if idx is None:
                raise NotFound(self.events.label, date_key)
            actions = rows[idx].get("massiveActions")
            pos = index_of(actions, action_id) if isinstance(actions, list) else None
            if pos is None:
                raise NotFound("Action", action_id)
            del actions[pos]
            if not actions:
                del rows[idx]

        self.events.transact(_remove)
        logger.info("Removed action %s from %s", action_id, date_key)
        return {"message": "Action removed"}
