# Request schemas. Known fields are type-checked; unknown fields pass through
# untouched (extra="allow"). Wire names are camelCase, attributes snake_case.
# Validation only accepts or rejects; the payload is stored as sent.
from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CategoryType = Literal["personal", "professional"]
BlockType = Literal["time", "project", "day", "week", "month", "quarter"]
DurationUnit = Literal["min", "hr", "d", "wk", "mo"]
ActionKey = Literal["✘", "✔", "O", "➜"]   # not started | done | pending | in progress
ActionStatus = Literal[
    "new", "planned", "in_progress", "leveraged",
    "completed", "cancelled", "not_needed", "moved",
]
DayOfWeek = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _check_iso(value: str) -> str:
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"not an ISO 8601 timestamp: {value!r}") from None
    return value


# Validated as ISO 8601 but stored exactly as sent
IsoTimestamp = Annotated[str, AfterValidator(_check_iso)]


class RecordIn(BaseModel):
    model_config = ConfigDict(
        extra="allow", populate_by_name=True, alias_generator=to_camel, allow_inf_nan=False,
    )

    id: Optional[Union[str, int]] = None   # Date.now() clients send numbers
    created_at: Optional[IsoTimestamp] = None
    updated_at: Optional[IsoTimestamp] = None


class NoteIn(RecordIn):
    text: Optional[str] = None
    type: Optional[Literal["progress", "remark"]] = None


class MassiveActionIn(RecordIn):
    text: Optional[str] = None
    leverage: Optional[Union[int, float, str]] = None
    duration_amount: Optional[Union[int, float]] = Field(default=None, ge=0)
    duration_unit: Optional[DurationUnit] = None
    priority: Optional[int] = None
    key: Optional[ActionKey] = None
    color: Optional[str] = None
    text_color: Optional[str] = None
    status: Optional[ActionStatus] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    day_of_week: Optional[DayOfWeek] = None
    start_date: Optional[IsoTimestamp] = None
    end_date: Optional[IsoTimestamp] = None
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    location: Optional[str] = None
    notes: Optional[List[NoteIn]] = None


class RoleIn(RecordIn):
    category_id: Optional[str] = None
    name: str = Field(min_length=1)
    purpose: Optional[str] = None
    description: Optional[str] = None
    core_qualities: Optional[List[str]] = None
    identity_statement: Optional[str] = None
    incantations: Optional[List[str]] = None
    reflection: Optional[str] = None
    image_blob: Optional[str] = None
    image_url: Optional[str] = None


class CategoryIn(RecordIn):
    name: str = Field(min_length=1)
    type: Optional[CategoryType] = None
    description: Optional[str] = None
    vision: Optional[str] = None
    purpose: Optional[str] = None
    resources: Optional[str] = None
    results: Optional[List[str]] = None
    action_plans: Optional[List[str]] = None
    three_to_thrive: Optional[List[str]] = None
    color: Optional[str] = None
    image_blob: Optional[str] = None
    roles: Optional[List[RoleIn]] = None


class RpmBlockIn(RecordIn):
    result: Optional[str] = None
    purposes: Optional[List[str]] = None
    massive_actions: Optional[List[MassiveActionIn]] = None
    category_id: Optional[str] = None
    type: Optional[BlockType] = None
    saved: Optional[bool] = None


class CalendarEventIn(RecordIn):
    """Mostly opaque: only the fields the day-action helpers rely on are typed."""

    title: Optional[str] = None
    date: Optional[str] = None
    massive_actions: Optional[List[MassiveActionIn]] = None
