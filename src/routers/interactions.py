"""
Interactions Router

Receives interaction events from the messaging client and returns the single
response the console produces for each.

The messaging client authenticates with the platform itself; this endpoint is
meant to be reachable only from that client.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from src.dashboards.manager import DashboardManager
from src.models.contracts.interactions import InteractionEvent
from src.models.contracts.views import InteractionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interactions", tags=["Interactions"])


def get_dashboard_manager(request: Request) -> DashboardManager:
    """Dashboard manager built during application startup."""
    return request.app.state.dashboard_manager


Manager = Annotated[DashboardManager, Depends(get_dashboard_manager)]


@router.get(
    "/health",
    summary="Interaction receiver health check",
    response_class=PlainTextResponse,
)
async def interactions_health() -> str:
    """Health check for the interaction receiver."""
    return "OK"


@router.post(
    "",
    response_model=InteractionResponse,
    summary="Handle an interaction",
    description="Route one interaction event to its channel's dashboard.",
)
async def handle_interaction(
    event: InteractionEvent,
    manager: Manager,
) -> InteractionResponse:
    """
    Handle a single interaction event.

    Always answers 200 with a response for the requester; failures inside the
    console are turned into status messages rather than HTTP errors.
    """
    logger.debug(f"Interaction {event.kind} from {event.requester.id} in {event.channel}: {event.custom_id}")
    return await manager.handle(event)
