# rpm_life/routes/routes_roles.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from starlette.requests import Request

from rpm_life.routes.routes_records import repository_for
from rpm_life.store.roles import RoleService

router = APIRouter(tags=["roles"])

_categories = repository_for("categories")


def get_roles(request: Request) -> RoleService:
    return RoleService(_categories(request))


@router.get("/api/roles")
def list_roles(roles: RoleService = Depends(get_roles)):
    return roles.list_roles()


@router.get("/api/roles/{role_id}")
def get_role(role_id: str, roles: RoleService = Depends(get_roles)):
    return roles.get_role(role_id)


@router.post("/api/categories/{category_id}/roles", status_code=201)
def create_role(category_id: str, payload: Any = Body(...), roles: RoleService = Depends(get_roles)):
    return roles.create_role(category_id, payload)


@router.put("/api/roles/{role_id}")
def update_role(role_id: str, payload: Any = Body(...), roles: RoleService = Depends(get_roles)):
    return roles.update_role(role_id, payload)


@router.delete("/api/roles/{role_id}")
def delete_role(role_id: str, roles: RoleService = Depends(get_roles)):
    return roles.delete_role(role_id)


__all__ = ["router"]
