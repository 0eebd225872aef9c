"""Application factory and context for the Clash War Tracker API.

This module provides a factory for creating the FastAPI app without
import-time side effects. The database connection is opened in the
application lifespan and handed to the routers through an AppContext
rather than a module-level global.

Usage:
------
    # For production (settings from environment and .env)
    app = create_app()

    # For testing (pre-built collaborators)
    context = AppContext(war_store=fake_store, ip_client=fake_ip_client)
    app = create_app(context=context)
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from warapi import __version__
from warapi.ip_client import OutboundIPClient
from warapi.logging_config import configure_logging
from warapi.war_store import WarStore
from warcore.config import DEFAULT_API_PORT, DEFAULT_DATABASE_NAME
from warcore.exceptions import ConfigurationError

UNHANDLED_ERROR_MESSAGE = "Something went wrong!"


def load_environment(dotenv_path: Optional[str] = None) -> bool:
    """Load settings from a `.env` file into the process environment.

    Variables already set in the environment take precedence. Without an
    explicit path the file is looked up from the working directory upwards.
    """
    return load_dotenv(dotenv_path or find_dotenv(usecwd=True))


@dataclass
class AppContext:
    """Runtime context holding all application state.

    A ``war_store`` supplied up front is used as-is and left open on
    shutdown; otherwise one is connected from ``mongodb_uri`` during the
    lifespan and closed afterwards.
    """

    # Collaborators
    war_store: Optional[WarStore] = None
    ip_client: OutboundIPClient = field(default_factory=OutboundIPClient)

    # Configuration
    mongodb_uri: Optional[str] = field(default_factory=lambda: os.getenv("MONGODB_URI"))
    database_name: str = field(
        default_factory=lambda: os.getenv("MONGODB_DATABASE", DEFAULT_DATABASE_NAME)
    )
    api_port: int = field(default_factory=lambda: int(os.getenv("PORT", str(DEFAULT_API_PORT))))
    production_mode: bool = field(
        default_factory=lambda: os.getenv("PRODUCTION", "false").lower() == "true"
    )
    allowed_origins: list = field(
        default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(",")
    )

    # Logging
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("warapi"))

    # Set when the lifespan opened the store itself
    owns_war_store: bool = False

    async def open_war_store(self) -> WarStore:
        if self.war_store is not None:
            return self.war_store

        if not self.mongodb_uri:
            raise ConfigurationError("MONGODB_URI is not set")

        store = WarStore.connect(self.mongodb_uri, self.database_name)
        try:
            await store.ping()
        except Exception:
            store.close()
            raise
        self.war_store = store
        self.owns_war_store = True
        return store

    async def close(self) -> None:
        await self.ip_client.close()
        if self.owns_war_store and self.war_store is not None:
            self.war_store.close()
            self.war_store = None
            self.owns_war_store = False


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logging.getLogger("warapi").error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse({"error": UNHANDLED_ERROR_MESSAGE}, status_code=500)


def create_app(
    *,
    mongodb_uri: Optional[str] = None,
    production_mode: Optional[bool] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        mongodb_uri: Override the connection string (default: MONGODB_URI env var)
        production_mode: Override production mode (default: PRODUCTION env var)
        context: Pre-configured AppContext (for testing). If None, creates a new one.

    Returns:
        Configured FastAPI application with context attached as app.state.context
    """
    logger = configure_logging()

    if context is None:
        load_environment()
        context = AppContext()

    if mongodb_uri is not None:
        context.mongodb_uri = mongodb_uri
    if production_mode is not None:
        context.production_mode = production_mode

    context.logger = logger

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown."""
        ctx = app.state.context

        try:
            war_store = await ctx.open_war_store()

            ctx.logger.info("Setting up API routers...")
            _setup_routers(app, ctx, war_store)

            ctx.logger.info("LIFESPAN: Startup complete - yielding control to app")
            yield
            ctx.logger.info("LIFESPAN: Received shutdown signal")

        except Exception as e:
            ctx.logger.error(f"Exception in lifespan startup: {e}", exc_info=True)
            raise
        finally:
            await ctx.close()

    app = FastAPI(
        title="Clash War Tracker API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if context.production_mode else "/docs",
        redoc_url=None if context.production_mode else "/redoc",
    )

    # Attach context to app state for access in routes
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.allowed_origins if context.production_mode else ["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, _unhandled_error)

    return app


def _setup_routers(app: FastAPI, ctx: AppContext, war_store: WarStore) -> None:
    """Setup and include all API routers."""
    from warapi.routers.health import setup_health_router
    from warapi.routers.members import setup_members_router
    from warapi.routers.wars import setup_wars_router

    app.include_router(setup_health_router(ctx.ip_client))
    app.include_router(setup_wars_router(war_store))
    app.include_router(setup_members_router(war_store))

    ctx.logger.info("All API routers configured successfully")
