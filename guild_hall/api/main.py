"""FastAPI application factory and server entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..models.guild_member import GuildMember
from ..services.commission_gateway import CommissionGateway
from ..services.config import AppConfig, get_config
from ..services.daemon_client import DaemonClient
from ..services.dashboard import DashboardAggregator
from ..services.errors import GuildHallError
from ..services.meeting_gateway import MeetingGateway
from ..services.projects import ProjectConfigError
from ..services.roster import discover_guild_members
from ..services.session_storage import FileSessionStorage
from ..services.session_store import SessionStore
from .routes import commissions, daemon, dashboard, meetings, roster, sessions

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    *,
    daemon_client: Optional[DaemonClient] = None,
    session_store: Optional[SessionStore] = None,
    roster_members: Optional[Dict[str, GuildMember]] = None,
    dashboard_aggregator: Optional[DashboardAggregator] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators not passed in are constructed from ``config`` when the
    lifespan starts. The daemon client is closed on shutdown either way.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Guild Hall starting...")

        client = daemon_client or DaemonClient.from_config(config)
        app.state.config = config
        app.state.daemon_client = client
        app.state.session_store = session_store or SessionStore(FileSessionStorage(config.sessions_dir))
        app.state.commission_gateway = CommissionGateway(client)
        app.state.meeting_gateway = MeetingGateway(client)
        app.state.roster = (
            roster_members
            if roster_members is not None
            else discover_guild_members(config.guild_members_dir)
        )
        app.state.dashboard = dashboard_aggregator or DashboardAggregator(config_path=config.config_path)

        target = config.daemon_url or config.daemon_socket_path
        logger.info(f"Guild Hall started (sessions: {config.sessions_dir}, daemon: {target})")

        yield

        logger.info("Guild Hall shutting down...")
        await client.close()
        logger.info("Guild Hall stopped")

    app = FastAPI(
        title="Guild Hall API",
        description="Sessions, commissions and meetings for the Guild Hall daemon",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GuildHallError)
    async def guild_hall_error_handler(request: Request, exc: GuildHallError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ProjectConfigError)
    async def project_config_error_handler(request: Request, exc: ProjectConfigError):
        logger.error(str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": "Invalid project config", "detail": exc.issues},
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    app.include_router(sessions.router)
    app.include_router(commissions.router)
    app.include_router(meetings.router)
    app.include_router(daemon.router)
    app.include_router(roster.router)
    app.include_router(dashboard.router)

    @app.get("/health")
    async def health():
        """Health check for the web layer itself."""
        return {"status": "healthy", "version": __version__}

    return app


def run_server(host: str = "127.0.0.1", port: int = 8000, log_level: str = "info") -> None:
    """Run the API with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting Guild Hall API on {host}:{port}")

    uvicorn.run(
        create_app(),
        host=host,
        port=port,
        log_level=log_level,
        access_log=True,
    )


__all__ = ["create_app", "run_server"]
