"""
Governance Console API - FastAPI Application

Main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.config import get_settings
from src.dashboards.manager import DashboardManager, load_dashboard_factories
from src.routers import interactions_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Suppress noisy third-party loggers
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_app(manager: DashboardManager | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        manager: Pre-built dashboard manager. When omitted, one is built at
            startup from GOVBOT_DASHBOARD_FACTORIES.

    Returns:
        Configured FastAPI application instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Builds the dashboard manager on startup.
        """
        logger.info("Starting Governance Console API...")
        settings = get_settings()

        dashboard_manager = manager
        if dashboard_manager is None:
            dashboard_manager = DashboardManager()
            load_dashboard_factories(dashboard_manager, settings.dashboard_factories_list)
        app.state.dashboard_manager = dashboard_manager

        logger.info(
            f"Governance Console API started in {settings.environment} mode "
            f"({len(dashboard_manager.channels)} channel(s))"
        )

        yield

        logger.info("Governance Console API shutdown complete")

    app = FastAPI(
        title="Governance Console API",
        description="Chat-bot admin console navigation",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(interactions_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
