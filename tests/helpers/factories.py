"""
Factory functions for test dashboards and events.

Usage:
    from tests.helpers.factories import build_test_dashboard, make_event

    async def test_something():
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:home:screen"))
"""

from collections.abc import Mapping, Sequence
from typing import Any

from src.dashboards.base import (
    Action,
    Dashboard,
    Handler,
    RenderArgs,
    Screen,
    TrackedInteraction,
)
from src.dashboards.pagination import PageState, PaginatedAction
from src.dashboards.permissions import DenyAll
from src.models.contracts.interactions import InteractionEvent, parse_interaction
from src.models.contracts.views import Button, ControlRow, View, ViewField


def make_event(
    kind: str = "button",
    custom_id: str | None = None,
    channel: str | None = "admin",
    requester_id: str = "user-1",
    **overrides: Any,
) -> InteractionEvent:
    """Build an inbound event; select events get a default value."""
    data: dict[str, Any] = {
        "kind": kind,
        "custom_id": custom_id,
        "channel": channel,
        "requester": {"id": requester_id, "display_name": "Test User"},
    }
    if kind == "select":
        data["values"] = ["1"]
    data.update(overrides)
    return InteractionEvent.model_validate(data)


def make_tracked(kind: str = "button", custom_id: str | None = None, **overrides: Any) -> TrackedInteraction:
    return TrackedInteraction(parse_interaction(make_event(kind, custom_id, **overrides)))


class EchoAction(Action):
    """Answers `ping` with 'pong', `boom` by raising the configured exception."""

    def __init__(
        self,
        action_id: str = "echo",
        error: Exception | None = None,
        sub_actions: Sequence[Action] = (),
    ):
        super().__init__(action_id, sub_actions)
        self.error = error
        self.calls: list[str] = []

    def operations(self) -> Mapping[str, Handler]:
        return {"ping": self.ping, "boom": self.boom, "silent": self.silent}

    def get_component(self, label: str = "Ping") -> Button:
        return Button(custom_id=self.custom_id("ping"), label=label)

    async def ping(self, interaction: TrackedInteraction) -> None:
        self.calls.append("ping")
        await interaction.respond(View(description="pong"))

    async def boom(self, interaction: TrackedInteraction) -> None:
        self.calls.append("boom")
        raise self.error or RuntimeError("kaboom")

    async def silent(self, interaction: TrackedInteraction) -> None:
        self.calls.append("silent")


class ItemsPaginator(PaginatedAction):
    """Paginates a mutable in-memory list of strings."""

    title = "Items"

    def __init__(self, items: Sequence[str], page_size: int = 5, action_id: str = "items"):
        super().__init__(action_id)
        self.items = list(items)
        self.page_size = page_size

    async def get_total_items(self, interaction: TrackedInteraction) -> int:
        return len(self.items)

    async def get_items_for_page(self, interaction: TrackedInteraction, page: int) -> Sequence[str]:
        start = page * self.page_size
        return self.items[start:start + self.page_size]

    async def render_page(self, interaction: TrackedInteraction, page: PageState) -> View:
        return View(
            title=self.title,
            fields=[ViewField(name=str(i), value=item) for i, item in enumerate(page.items)],
        )


class StaticScreen(Screen):
    """Screen whose default view is its own title plus one button per action."""

    def __init__(self, screen_id: str, title: str | None = None, **kwargs: Any):
        super().__init__(screen_id, **kwargs)
        self.title = title or screen_id.capitalize()

    async def get_response(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        buttons = [
            a.get_component() for a in self.actions if isinstance(a, EchoAction)
        ]
        rows = [ControlRow(controls=buttons)] if buttons else []
        return View(title=self.title, rows=rows)


def build_test_dashboard(items: Sequence[str] | None = None, page_size: int = 5) -> Dashboard:
    """
    Dashboard "test":

        home    - open to everyone, EchoAction "echo"
        list    - ItemsPaginator "items" over `items` (12 by default)
        locked  - DenyAll, EchoActions "first" and "second"
    """
    if items is None:
        items = [f"item-{i}" for i in range(12)]

    listing = StaticScreen("list", actions=[ItemsPaginator(items, page_size=page_size)])
    locked = StaticScreen(
        "locked",
        actions=[EchoAction("first"), EchoAction("second")],
        permissions=[DenyAll()],
    )
    home = StaticScreen("home", actions=[EchoAction()], sub_screens=[listing, locked])
    return Dashboard("test", home)
