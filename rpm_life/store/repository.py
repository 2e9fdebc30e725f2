# Resource handler: list / get / create / update / delete over a record store.
#
# Every mutation is one locked read-modify-write of the whole store:
#   lock -> read_all() -> mutate list in memory -> write_all() -> unlock
# A handler that raises (NotFound, InvalidRecord) leaves the store untouched.

from __future__ import annotations

import copy
import json
import logging
import math
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from rpm_life.store.errors import InvalidRecord, NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")


def new_id() -> str:
    return uuid.uuid4().hex


def record_id(rec: Any) -> Any:
    return rec.get("id") if isinstance(rec, dict) else None


def same_id(rec: Any, rid: Any) -> bool:
    # Ids from URLs are strings; stored ids may be numbers (Date.now() clients)
    stored = record_id(rec)
    return stored is not None and str(stored) == str(rid)


def index_of(rows: List[Dict], rid: Any) -> Optional[int]:
    for i, rec in enumerate(rows):
        if same_id(rec, rid):
            return i
    return None


def _non_finite(value: Any, loc: Tuple = ()) -> Optional[List]:
    """Location of the first NaN/Infinity inside `value`, or None."""
    if isinstance(value, float) and not math.isfinite(value):
        return list(loc)
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, list):
        items = enumerate(value)
    else:
        return None
    for key, item in items:
        hit = _non_finite(item, loc + (key,))
        if hit is not None:
            return hit
    return None


def clean_payload(payload: Any, label: str, schema: Optional[Type[BaseModel]] = None) -> Dict:
    """Validate against `schema` and return the payload, as sent, minus any client id."""
    if not isinstance(payload, dict):
        raise InvalidRecord(label, [{"type": "dict_type", "loc": [], "msg": "expected a JSON object"}])
    bad = _non_finite(payload)
    if bad is not None:
        raise InvalidRecord(label, [{"type": "finite_number", "loc": bad, "msg": "Input should be a finite number"}])
    if schema is not None:
        try:
            schema.model_validate(payload)
        except ValidationError as e:
            raise InvalidRecord(label, json.loads(e.json(include_url=False))) from e
    data = copy.deepcopy(payload)
    data.pop("id", None)
    return data


class Repository:
    def __init__(self, store, label: str, schema: Optional[Type[BaseModel]] = None):
        self.store = store
        self.label = label
        self.schema = schema

    def __repr__(self) -> str:
        return f"Repository({self.label!r}, {self.store!r})"

    def clean(self, payload: Any) -> Dict:
        return clean_payload(payload, self.label, self.schema)

    def transact(self, fn: Callable[[List[Dict]], T]) -> T:
        """Locked read -> fn(rows) mutates in place -> write. No write if fn raises."""
        with self.store.locked():
            rows = self.store.read_all()
            result = fn(rows)
            self.store.write_all(rows)
        return result

    def list(self) -> List[Dict]:
        return self.store.read_all()

    def get(self, rid: str) -> Dict:
        rows = self.store.read_all()
        idx = index_of(rows, rid)
        if idx is None:
            raise NotFound(self.label, rid)
        return rows[idx]

    def create(self, payload: Any) -> Dict:
        data = self.clean(payload)

        def _append(rows: List[Dict]) -> Dict:
            taken = {record_id(r) for r in rows}
            rid = new_id()
            while rid in taken:
                rid = new_id()
            rec = {**data, "id": rid}
            rows.append(rec)
            return rec

        rec = self.transact(_append)
        logger.info("Created %s %s", self.label, rec["id"])
        return rec

    def update(self, rid: str, payload: Any) -> Dict:
        data = self.clean(payload)

        def _replace(rows: List[Dict]) -> Dict:
            idx = index_of(rows, rid)
            if idx is None:
                raise NotFound(self.label, rid)
            rows[idx] = {**data, "id": record_id(rows[idx])}   # stored id is pinned, client id discarded
            return rows[idx]

        rec = self.transact(_replace)
        logger.info("Updated %s %s", self.label, rid)
        return rec

    def delete(self, rid: str) -> Dict[str, str]:
        def _remove(rows: List[Dict]) -> None:
            kept = [r for r in rows if not same_id(r, rid)]
            if len(kept) == len(rows):
                raise NotFound(self.label, rid)
            rows[:] = kept

        self.transact(_remove)
        logger.info("Deleted %s %s", self.label, rid)
        return {"message": f"{self.label} deleted"}
