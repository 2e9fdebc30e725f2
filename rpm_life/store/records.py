# Record accessors: whole-store read/write for one resource.
#
# Both stores expose the same surface:
#   read_all()        -> list of records (dicts), in stored order
#   write_all(rows)   -> replace the whole store
#   locked()          -> context manager serializing read-modify-write
#   ensure()          -> create an empty store if none exists (bootstrap only)

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from sqlalchemy.orm import sessionmaker

from rpm_life.models.models_store import StoredRecord
from rpm_life.store.errors import MalformedStore, StoreLockTimeout
from rpm_life.utils import persistence

logger = logging.getLogger(__name__)


def _as_records(parsed, source: str, envelope: Optional[str]) -> List[Dict]:
    if isinstance(parsed, dict) and envelope and isinstance(parsed.get(envelope), list):
        parsed = parsed[envelope]
    if not isinstance(parsed, list):
        raise MalformedStore(source, f"expected a JSON array, got {type(parsed).__name__}")
    return parsed


class JsonRecordStore:
    """One resource stored as a pretty-printed JSON array on disk."""

    def __init__(self, path: str | Path, envelope: Optional[str] = None, lock_timeout: float = 3.0):
        self.path = Path(path)
        self.envelope = envelope
        self.lock_timeout = lock_timeout

    def __repr__(self) -> str:
        return f"JsonRecordStore({str(self.path)!r})"

    def read_all(self) -> List[Dict]:
        rows = _as_records(persistence.load_json(self.path), str(self.path), self.envelope)
        logger.debug("read %d record(s) from %s", len(rows), self.path)
        return rows

    def write_all(self, records: List[Dict]) -> None:
        persistence.save_json(self.path, list(records))
        logger.debug("wrote %d record(s) to %s", len(records), self.path)

    def locked(self):
        return persistence.locked(self.path, timeout=self.lock_timeout)

    def ensure(self) -> bool:
        """Create an empty store if the file is absent. Returns True if created."""
        if self.path.exists():
            return False
        persistence.save_json(self.path, [])
        logger.info("Created empty store %s", self.path)
        return True


class SqlRecordStore:
    """Same interface, rows in the rpm_records table (one row per record)."""

    _locks: Dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, session_factory: sessionmaker, resource: str, lock_timeout: float = 3.0):
        self.session_factory = session_factory
        self.resource = resource
        self.lock_timeout = lock_timeout

    def __repr__(self) -> str:
        return f"SqlRecordStore({self.resource!r})"

    def _lock(self) -> threading.Lock:
        key = f"{id(self.session_factory)}:{self.resource}"
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def read_all(self) -> List[Dict]:
        with self.session_factory() as s:
            rows = (
                s.query(StoredRecord)
                .filter_by(resource=self.resource)
                .order_by(StoredRecord.position)
                .all()
            )
            out = []
            for row in rows:
                try:
                    out.append(json.loads(row.data))
                except json.JSONDecodeError as e:
                    raise MalformedStore(f"rpm_records[{self.resource}#{row.pk}]", f"invalid JSON: {e}") from e
        return out

    def write_all(self, records: List[Dict]) -> None:
        with self.session_factory() as s:
            s.query(StoredRecord).filter_by(resource=self.resource).delete()
            for pos, rec in enumerate(records):
                s.add(StoredRecord(
                    resource=self.resource,
                    record_id=str(rec.get("id", "")),
                    position=pos,
                    data=json.dumps(rec, ensure_ascii=False, allow_nan=False),
                ))
            s.commit()
        logger.debug("wrote %d record(s) to rpm_records[%s]", len(records), self.resource)

    @contextmanager
    def locked(self) -> Iterator[None]:
        lock = self._lock()
        if not lock.acquire(timeout=self.lock_timeout):
            raise StoreLockTimeout(f"rpm_records[{self.resource}]")
        try:
            yield
        finally:
            lock.release()

    def ensure(self) -> bool:
        # An empty table already reads as [].
        return False
