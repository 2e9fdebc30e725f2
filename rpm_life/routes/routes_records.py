# rpm_life/routes/routes_records.py
# CRUD surface shared by every resource: /api/<resource>[/{id}]
from __future__ import annotations

from typing import Any, Callable, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from starlette.requests import Request

from rpm_life.store.repository import Repository


# ---------- App state accessors ----------
def get_repositories(request: Request) -> Dict[str, Repository]:
    repos = getattr(request.app.state, "repositories", None)
    if repos is None:
        raise HTTPException(status_code=500, detail="Repositories not initialized")
    return repos


def repository_for(resource: str) -> Callable[[Request], Repository]:
    def _get(request: Request) -> Repository:
        repos = get_repositories(request)
        if resource not in repos:
            raise HTTPException(status_code=500, detail=f"No store configured for {resource}")
        return repos[resource]

    return _get


# ---------- Routes ----------
def make_record_router(resource: str) -> APIRouter:
    router = APIRouter(prefix=f"/api/{resource}", tags=[resource])
    get_repo = repository_for(resource)

    @router.get("")
    def list_records(repo: Repository = Depends(get_repo)):
        return repo.list()

    @router.get("/{record_id}")
    def get_record(record_id: str, repo: Repository = Depends(get_repo)):
        return repo.get(record_id)

    @router.post("", status_code=201)
    def create_record(payload: Any = Body(...), repo: Repository = Depends(get_repo)):
        return repo.create(payload)

    @router.put("/{record_id}")
    def update_record(record_id: str, payload: Any = Body(...), repo: Repository = Depends(get_repo)):
        return repo.update(record_id, payload)

    @router.delete("/{record_id}")
    def delete_record(record_id: str, repo: Repository = Depends(get_repo)):
        return repo.delete(record_id)

    return router


__all__ = ["make_record_router", "get_repositories", "repository_for"]
