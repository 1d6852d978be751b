"""FastAPI application factory.

Run with ``uvicorn quickcmd.api.main:create_app --factory``.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quickcmd import __version__
from quickcmd.api.categories.router import router as categories_router
from quickcmd.api.commands.router import router as commands_router
from quickcmd.api.detection.router import router as detection_router
from quickcmd.api.middleware import RequestIdMiddleware
from quickcmd.commands.manager import CommandManager, create_manager
from quickcmd.core.config import Settings, get_settings


def create_app(
    settings: Optional[Settings] = None,
    manager: Optional[CommandManager] = None,
) -> FastAPI:
    settings = settings or get_settings()

    _app = FastAPI(
        title="quickcmd API",
        description="Project detection and command catalog for a workspace",
        version=__version__,
    )

    # ---------------------------------------------------------------------------
    # Middleware (registered outermost -> innermost)
    # ---------------------------------------------------------------------------
    _app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _app.add_middleware(RequestIdMiddleware)

    # ---------------------------------------------------------------------------
    # Logging: configure structlog before any routers log anything
    # ---------------------------------------------------------------------------
    from quickcmd.core.logging import configure_structlog

    configure_structlog(debug=settings.debug)

    # ---------------------------------------------------------------------------
    # Services: one manager per app, initialized on first request
    # ---------------------------------------------------------------------------
    _app.state.settings = settings
    _app.state.manager = manager or create_manager(settings)

    # ---------------------------------------------------------------------------
    # Routes
    # ---------------------------------------------------------------------------

    @_app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    _app.include_router(detection_router)
    _app.include_router(categories_router)
    _app.include_router(commands_router)

    return _app
