# Starter categories for an empty install.

from __future__ import annotations

import copy
import logging
from typing import Dict, List

from rpm_life.store.repository import Repository

logger = logging.getLogger(__name__)

INITIAL_CATEGORIES: List[Dict] = [
    {
        "id": "health",
        "name": "Health",
        "type": "personal",
        "description": "Physical and mental well-being management",
        "roles": [
            {
                "id": "health-1",
                "categoryId": "health",
                "name": "Fitness Enthusiast",
                "purpose": "Maintain optimal physical health through regular exercise",
                "coreQualities": ["Disciplined", "Energetic", "Consistent"],
                "identityStatement": "I am committed to maintaining a healthy and active lifestyle",
                "reflection": "Regular exercise helps me stay energized and focused",
            }
        ],
    },
    {
        "id": "career",
        "name": "Career Development",
        "type": "professional",
        "description": "Professional growth and career advancement",
        "roles": [
            {
                "id": "career-1",
                "categoryId": "career",
                "name": "Tech Leader",
                "purpose": "Guide and mentor teams while staying technically proficient",
                "coreQualities": ["Strategic", "Innovative", "Mentoring"],
                "identityStatement": "I am a leader who empowers others through technology",
                "reflection": "Technology leadership requires continuous learning",
            }
        ],
    },
]


def seed_categories(repo: Repository) -> int:
    """Write the starter categories into an empty store. Returns how many were added."""
    def _seed(rows: List[Dict]) -> int:
        if rows:
            return 0
        rows.extend(copy.deepcopy(INITIAL_CATEGORIES))
        return len(INITIAL_CATEGORIES)

    added = repo.transact(_seed)
    if added:
        logger.info("Seeded %d categories", added)
    return added
