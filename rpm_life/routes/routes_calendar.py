# rpm_life/routes/routes_calendar.py
# Day-keyed massive actions: /api/calendar-events/{dateKey}/actions
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette.requests import Request

from rpm_life.routes.routes_records import repository_for
from rpm_life.store.calendar_days import CalendarDayService

router = APIRouter(prefix="/api/calendar-events", tags=["calendar-events"])

_events = repository_for("calendar-events")


def get_days(request: Request) -> CalendarDayService:
    return CalendarDayService(_events(request))


@router.post("/{date_key}/actions", status_code=201)
def add_action(date_key: str, action: Any = Body(...), days: CalendarDayService = Depends(get_days)):
    return days.add_action(date_key, action)


@router.delete("/{date_key}/actions/{action_id}")
def remove_action(date_key: str, action_id: str, days: CalendarDayService = Depends(get_days)):
    return days.remove_action(date_key, action_id)


__all__ = ["router"]
