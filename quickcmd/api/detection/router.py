"""Project detection endpoint."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from quickcmd.api.dependencies import get_manager
from quickcmd.commands.manager import CommandManager

router = APIRouter(prefix="/detection", tags=["detection"])


@router.get("")
async def get_detection(
    refresh: bool = Query(default=False, description="Ignore the cached result and re-run detection"),
    manager: CommandManager = Depends(get_manager),
) -> dict[str, Any]:
    """Detection result for the configured workspace, camelCase keys."""
    result = await manager.detect_current_project(force_refresh=refresh)
    return result.to_dict()
