"""Category endpoints: filtered listing, suggestions, stats and bulk edits."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from quickcmd.api.dependencies import get_manager
from quickcmd.commands.manager import CommandManager
from quickcmd.db.store import CategoryNotFoundError

router = APIRouter(prefix="/categories", tags=["categories"])


class CategoryResponse(BaseModel):
    id: str
    display_name: str
    icon: str
    command_count: int


class SuggestedCategoryResponse(BaseModel):
    id: str
    display_name: str
    icon: str
    priority: float


class CategoryRenameRequest(BaseModel):
    new_name: str = Field(..., min_length=1, description="New category id")


class CategoryChangeResponse(BaseModel):
    category: str
    affected: int


def _category_response(manager: CommandManager, category_id: str) -> CategoryResponse:
    info = manager.get_category_display_info(category_id)
    return CategoryResponse(
        id=category_id,
        display_name=info.display_name,
        icon=info.icon,
        command_count=manager.get_category_command_count(category_id),
    )


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    check_dependencies: Optional[bool] = Query(
        default=None,
        description="Hide categories whose tool is not installed (defaults to the server setting)",
    ),
    manager: CommandManager = Depends(get_manager),
) -> list[CategoryResponse]:
    categories = await manager.get_filtered_categories(check_dependencies=check_dependencies)
    return [_category_response(manager, c) for c in categories]


@router.get("/suggested", response_model=list[SuggestedCategoryResponse])
async def suggested_categories(
    manager: CommandManager = Depends(get_manager),
) -> list[SuggestedCategoryResponse]:
    suggestions = await manager.get_suggested_categories()
    responses = []
    for suggestion in suggestions:
        info = manager.get_category_display_info(suggestion.id)
        responses.append(
            SuggestedCategoryResponse(
                id=suggestion.id,
                display_name=info.display_name,
                icon=info.icon,
                priority=suggestion.priority,
            )
        )
    return responses


@router.get("/stats")
async def category_stats(manager: CommandManager = Depends(get_manager)) -> dict[str, Any]:
    stats = await manager.get_project_stats()
    return stats.to_dict()


@router.put("/{name}", response_model=CategoryChangeResponse)
async def rename_category(
    name: str,
    body: CategoryRenameRequest,
    manager: CommandManager = Depends(get_manager),
) -> CategoryChangeResponse:
    try:
        changed = manager.rename_category(name, body.new_name)
    except CategoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryChangeResponse(category=body.new_name, affected=changed)


@router.delete("/{name}", response_model=CategoryChangeResponse)
async def delete_category(
    name: str,
    manager: CommandManager = Depends(get_manager),
) -> CategoryChangeResponse:
    try:
        removed = manager.delete_category(name)
    except CategoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CategoryChangeResponse(category=name, affected=removed)
