from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authgate.app import App
from authgate.config import Config
from authgate.errors import UserError
from authgate.web.error_handlers import general_exception_handler, user_error_handler
from authgate.web.guard import RouteGuard, RouteGuardMiddleware
from authgate.web.openapi import set_custom_openapi
from authgate.web.routers import auth_router, pages_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="AuthGate API",
        lifespan=lifespan,
    )
    # Store app instance and config in app state
    app.state.app = app_instance
    app.state.config = config

    guard = RouteGuard(app_instance.provider, config.protected_paths, config.home_path)
    app.add_middleware(RouteGuardMiddleware, guard=guard)

    # Add CORS middleware for frontend development
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(pages_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, config)

    return app
