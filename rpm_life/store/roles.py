# Roles are stored inside their category: categories.json -> [{..., "roles": [...]}]
# Every role operation is a transaction on the categories store.

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from rpm_life.models.schemas import RoleIn
from rpm_life.store.errors import NotFound
from rpm_life.store.repository import Repository, clean_payload, index_of, new_id, record_id

logger = logging.getLogger(__name__)

LABEL = "Role"


def _roles_of(category: Dict) -> List[Dict]:
    roles = category.get("roles")
    return roles if isinstance(roles, list) else []


def _find_role(rows: List[Dict], role_id: str) -> Optional[Tuple[Dict, int]]:
    for cat in rows:
        if not isinstance(cat, dict):
            continue
        idx = index_of(_roles_of(cat), role_id)
        if idx is not None:
            return cat, idx
    return None


class RoleService:
    def __init__(self, categories: Repository):
        self.categories = categories

    def list_roles(self) -> List[Dict]:
        out: List[Dict] = []
        for cat in self.categories.list():
            if isinstance(cat, dict):
                out.extend(_roles_of(cat))
        return out

    def get_role(self, role_id: str) -> Dict:
        hit = _find_role(self.categories.list(), role_id)
        if hit is None:
            raise NotFound(LABEL, role_id)
        cat, idx = hit
        return _roles_of(cat)[idx]

    def create_role(self, category_id: str, payload: Any) -> Dict:
        data = clean_payload(payload, LABEL, RoleIn)

        def _add(rows: List[Dict]) -> Dict:
            idx = index_of(rows, category_id)
            if idx is None:
                raise NotFound(self.categories.label, category_id)
            cat = rows[idx]
            role = {**data, "id": new_id(), "categoryId": cat.get("id")}
            cat["roles"] = _roles_of(cat) + [role]
            return role

        role = self.categories.transact(_add)
        logger.info("Created role %s in category %s", role["id"], category_id)
        return role

    def update_role(self, role_id: str, payload: Any) -> Dict:
        data = clean_payload(payload, LABEL, RoleIn)

        def _replace(rows: List[Dict]) -> Dict:
            hit = _find_role(rows, role_id)
            if hit is None:
                raise NotFound(LABEL, role_id)
            cat, idx = hit
            # A role cannot be moved between categories by editing it.
            role = {**data, "id": record_id(cat["roles"][idx]), "categoryId": cat.get("id")}
            cat["roles"][idx] = role
            return role

        return self.categories.transact(_replace)

    def delete_role(self, role_id: str) -> Dict[str, str]:
        def _remove(rows: List[Dict]) -> None:
            hit = _find_role(rows, role_id)
            if hit is None:
                raise NotFound(LABEL, role_id)
            cat, idx = hit
            del cat["roles"][idx]

        self.categories.transact(_remove)
        logger.info("Deleted role %s", role_id)
        return {"message": f"{LABEL} deleted"}
