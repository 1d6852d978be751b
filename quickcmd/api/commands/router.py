"""Command endpoints.

Listing is filtered by the detected project unless ``all=true``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from quickcmd.api.commands.schemas import CommandCreateRequest, CommandPatchRequest, CommandResponse
from quickcmd.api.dependencies import get_manager
from quickcmd.commands.manager import CommandManager
from quickcmd.db.store import CommandNotFoundError

router = APIRouter(prefix="/commands", tags=["commands"])


@router.get("", response_model=list[CommandResponse])
async def list_commands(
    category: Optional[str] = Query(default=None, description="Only commands in this category"),
    q: Optional[str] = Query(default=None, description="Case-insensitive search text"),
    all: bool = Query(default=False, description="Skip project-based filtering"),
    manager: CommandManager = Depends(get_manager),
) -> list[CommandResponse]:
    if q:
        commands = manager.search_commands(q)
        if category:
            commands = [c for c in commands if c.category == category]
    elif category:
        commands = manager.get_commands_by_category(category)
    else:
        commands = manager.get_all_commands()

    if not all:
        await manager.detect_current_project()
        commands = await manager.apply_project_filter(commands)

    return [CommandResponse.model_validate(c, from_attributes=True) for c in commands]


@router.get("/{command_id}", response_model=CommandResponse)
async def get_command(
    command_id: int,
    manager: CommandManager = Depends(get_manager),
) -> CommandResponse:
    try:
        command = manager.get_command(command_id)
    except CommandNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CommandResponse.model_validate(command, from_attributes=True)


@router.post("", response_model=CommandResponse, status_code=status.HTTP_201_CREATED)
async def create_command(
    body: CommandCreateRequest,
    manager: CommandManager = Depends(get_manager),
) -> CommandResponse:
    command = manager.add_command(
        label=body.label,
        command=body.command,
        category=body.category,
        description=body.description,
        icon=body.icon,
    )
    return CommandResponse.model_validate(command, from_attributes=True)


@router.patch("/{command_id}", response_model=CommandResponse)
async def patch_command(
    command_id: int,
    body: CommandPatchRequest,
    manager: CommandManager = Depends(get_manager),
) -> CommandResponse:
    changes = body.model_dump(exclude_unset=True)
    for required in ("label", "command", "category"):
        if required in changes and changes[required] is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"{required} cannot be null",
            )
    try:
        command = manager.update_command(command_id, **changes)
    except CommandNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CommandResponse.model_validate(command, from_attributes=True)


@router.delete("/{command_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_command(
    command_id: int,
    manager: CommandManager = Depends(get_manager),
) -> Response:
    try:
        manager.delete_command(command_id)
    except CommandNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
