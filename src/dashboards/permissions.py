"""
Built-in screen permissions.

Domain code with its own checks (e.g. "is the requester in the facilitators
group") wraps them in PredicatePermission rather than subclassing here.
"""

from collections.abc import Awaitable, Callable, Iterable

from src.config import get_settings
from src.dashboards.base import Permission, TrackedInteraction


class DenyAll(Permission):
    """Locks a screen entirely."""

    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        return False


class RequesterIdPermission(Permission):
    """Allows a fixed set of user ids."""

    def __init__(self, allowed_ids: Iterable[str]):
        self.allowed_ids = frozenset(allowed_ids)

    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        return interaction.requester.id in self.allowed_ids


class AdminPermission(Permission):
    """Allows the console admins listed in GOVBOT_ADMIN_USER_IDS."""

    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        return interaction.requester.id in get_settings().admin_user_ids_list


class RolePermission(Permission):
    """Allows requesters holding any of the given roles."""

    def __init__(self, roles: Iterable[str]):
        self.roles = frozenset(roles)

    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        return not self.roles.isdisjoint(interaction.requester.roles)


class PredicatePermission(Permission):
    """Delegates to an async predicate supplied by domain code."""

    def __init__(self, predicate: Callable[[TrackedInteraction], Awaitable[bool]]):
        self.predicate = predicate

    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        return bool(await self.predicate(interaction))
