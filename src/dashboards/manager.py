"""
Dashboard Manager

Maps channel names to dashboards and is the single entry point for inbound
interaction events.
"""

import importlib
import logging
from collections.abc import Callable, Iterable, Mapping

from src.core.exceptions import ConfigurationError
from src.dashboards import status
from src.dashboards.base import Dashboard, TrackedInteraction
from src.models.contracts.interactions import InteractionEvent, parse_interaction
from src.models.contracts.views import InteractionResponse

logger = logging.getLogger(__name__)

DashboardFactory = Callable[[], Mapping[str, Dashboard]]


class DashboardManager:
    """
    Registry of channel -> dashboard.

    Built once at startup; lookups only afterwards.
    """

    def __init__(self) -> None:
        self._dashboards: dict[str, Dashboard] = {}

    def register(self, channel: str, dashboard: Dashboard) -> None:
        """
        Register a dashboard for a channel.

        Raises:
            ConfigurationError: The channel already has a dashboard
        """
        if not channel:
            raise ConfigurationError(f"Dashboard '{dashboard.id}' needs a channel name")
        if channel in self._dashboards:
            raise ConfigurationError(f"Channel '{channel}' already has a dashboard")
        self._dashboards[channel] = dashboard
        logger.debug(f"Registered dashboard '{dashboard.id}' for channel '{channel}'")

    def get(self, channel: str | None) -> Dashboard | None:
        if not channel:
            return None
        return self._dashboards.get(channel)

    @property
    def channels(self) -> list[str]:
        return list(self._dashboards)

    async def handle(self, event: InteractionEvent) -> InteractionResponse:
        """Decode an inbound event and route it to its channel's dashboard."""
        interaction = TrackedInteraction(parse_interaction(event))

        if not event.channel:
            await status.error(interaction, "Unable to determine the channel.")
            return interaction.response

        dashboard = self.get(event.channel)
        if dashboard is None:
            logger.info(f"No dashboard registered for channel '{event.channel}'")
            await status.error(interaction, "No dashboard found for this channel.")
            return interaction.response

        return await dashboard.route(interaction)


def load_factory(path: str) -> DashboardFactory:
    """
    Import a 'package.module:callable' factory.

    Raises:
        ConfigurationError: The path is malformed or cannot be imported
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Dashboard factory must look like 'module:callable', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import dashboard factory module {module_name!r}", e) from e

    factory = getattr(module, attr, None)
    if not callable(factory):
        raise ConfigurationError(f"{path!r} is not a callable dashboard factory")
    return factory


def load_dashboard_factories(manager: DashboardManager, paths: Iterable[str]) -> None:
    """Register every dashboard produced by the given factories."""
    for path in paths:
        factory = load_factory(path)
        dashboards = factory()
        for channel, dashboard in dashboards.items():
            manager.register(channel, dashboard)
        logger.info(f"Loaded {len(dashboards)} dashboard(s) from {path}")
