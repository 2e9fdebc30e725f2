# rpm_life/routes/routes_rpmblocks.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from rpm_life.planning.block_summary import summarize_block
from rpm_life.routes.routes_records import repository_for
from rpm_life.store.repository import Repository

router = APIRouter(prefix="/api/rpmblocks", tags=["rpmblocks"])


@router.get("/{block_id}/summary")
def block_summary(block_id: str, repo: Repository = Depends(repository_for("rpmblocks"))):
    return summarize_block(repo.get(block_id))


__all__ = ["router"]
