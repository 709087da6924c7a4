"""Editor configuration routes."""

from typing import Any

from fastapi import APIRouter

from inkwell.domain.editor import describe

router = APIRouter(prefix="/editor", tags=["Editor"])


@router.get("/config")
async def get_editor_config() -> dict[str, Any]:
    return describe()
