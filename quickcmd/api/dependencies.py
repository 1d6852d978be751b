"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from quickcmd.commands.manager import CommandManager


async def get_manager(request: Request) -> CommandManager:
    """Return the app's CommandManager, initializing it on first use."""
    manager: CommandManager = request.app.state.manager
    await manager.ensure_initialized()
    return manager
