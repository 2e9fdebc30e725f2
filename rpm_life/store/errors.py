# Store-level failures; main.py maps each one to an HTTP response.

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List


class StoreError(Exception):
    """Base for everything the persistence layer raises."""


class NotFound(StoreError):
    def __init__(self, label: str, record_id: str = ""):
        self.label = label
        self.record_id = record_id
        super().__init__(f"{label} not found")


class MalformedStore(StoreError):
    """Store is missing or does not hold a JSON array. Needs manual repair."""

    def __init__(self, path: str | Path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class InvalidRecord(StoreError, ValueError):
    def __init__(self, label: str, errors: List[Dict[str, Any]]):
        self.label = label
        self.errors = errors
        super().__init__(f"Invalid {label.lower()}")


class StoreLockTimeout(StoreError, TimeoutError):
    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Could not acquire lock for {self.path}")
