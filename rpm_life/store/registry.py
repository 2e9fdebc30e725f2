# Builds one Repository per configured resource, on the configured backend.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rpm_life.models.models_store import Base
from rpm_life.models.schemas import CalendarEventIn, CategoryIn, RpmBlockIn
from rpm_life.store.records import JsonRecordStore, SqlRecordStore
from rpm_life.store.repository import Repository
from rpm_life.utils.config import CONFIG

logger = logging.getLogger(__name__)

SCHEMAS = {
    "categories": CategoryIn,
    "calendar-events": CalendarEventIn,
    "rpmblocks": RpmBlockIn,
}


def make_session_factory(database_url: str) -> sessionmaker:
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)


def build_repositories(config: Optional[Dict] = None) -> Dict[str, Repository]:
    config = config or CONFIG
    storage = config["storage"]
    backend = storage.get("backend", "json")
    timeout = storage.get("lock_timeout", 3.0)

    if backend == "sql":
        SessionLocal = make_session_factory(storage["database_url"])
    elif backend != "json":
        raise ValueError(f"unknown storage backend: {backend!r}")

    repos: Dict[str, Repository] = {}
    for name, rcfg in config["resources"].items():
        if backend == "sql":
            store = SqlRecordStore(SessionLocal, name, lock_timeout=timeout)
        else:
            store = JsonRecordStore(
                Path(storage["data_dir"]) / rcfg["file"],
                envelope=rcfg.get("envelope"),
                lock_timeout=timeout,
            )
        if storage.get("create_missing", True):
            store.ensure()
        repos[name] = Repository(store, rcfg["label"], SCHEMAS.get(name))
        logger.debug("Resource %s -> %r", name, store)
    return repos
