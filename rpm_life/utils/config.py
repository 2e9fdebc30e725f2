# Config flags and runtime settings

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


CONFIG = {
    "debug_mode": _env_bool("RPM_DEBUG", False),

    # Where records live: "json" (one file per resource) or "sql" (SQLAlchemy)
    "storage": {
        "backend": os.getenv("RPM_STORAGE_BACKEND", "json"),
        "data_dir": os.getenv("RPM_DATA_DIR", "data"),
        "database_url": os.getenv("DATABASE_URL", "sqlite:///./rpm_life.db"),
        "create_missing": True,        # write an empty [] store on startup if absent
        "lock_timeout": float(os.getenv("RPM_LOCK_TIMEOUT", "3.0")),
    },

    # One entry per REST resource; key is the URL segment
    "resources": {
        "categories": {
            "file": "categories.json",
            "label": "Category",
        },
        "calendar-events": {
            "file": "calendar-events.json",
            "label": "Calendar Event",
        },
        "rpmblocks": {
            "file": "rpmBlocks.json",
            "label": "RPM Block",
            "envelope": "rpmBlocks",   # older files wrap the array in {"rpmBlocks": [...]}
        },
    },

    "server": {
        "host": os.getenv("HOST", "127.0.0.1"),
        "port": int(os.getenv("PORT", "3001")),
        "cors_origins": [os.getenv("FRONTEND_URL", "http://localhost:3000")],
    },
}
