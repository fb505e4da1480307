"""
Dashboard Base Classes

The navigation tree the console routes through:

    Dashboard --(screen id)--> Screen --(action id)--> Action --(operation id)--> handler

Addressing is always flat: a custom id names one dashboard, one screen and one
action, and the action picks a handler by operation id. Child screens and
sub-actions exist for menu construction and bookkeeping only.

Trees are built explicitly. Actions are handed to their Screen, screens to
their Dashboard, and each object is bound to its parent exactly once while the
tree is assembled; nothing registers itself in a global table.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

from src.core import custom_id as codec
from src.core.context import ContextKey, InteractionContext
from src.core.custom_id import CustomId
from src.core.exceptions import (
    ConfigurationError,
    EndUserError,
    MalformedIdentifierError,
)
from src.dashboards import status
from src.models.contracts.interactions import (
    AnyInteraction,
    Interaction,
    Requester,
)
from src.models.contracts.views import (
    Button,
    InteractionResponse,
    Modal,
    SelectMenu,
    StatusBanner,
    View,
)

logger = logging.getLogger(__name__)

InteractionT = TypeVar("InteractionT", bound=Interaction)

# Reserved action id every screen answers to with its default view
RENDER_ACTION_ID = "screen"


def _check_id(value: str, what: str) -> str:
    if not value or codec.SEPARATOR in value:
        raise ConfigurationError(f"Invalid {what} {value!r}")
    return value


@dataclass
class RenderArgs:
    """One-shot status banner for a (re)render. Never persisted."""

    success_message: str | None = None
    error_message: str | None = None
    info_message: str | None = None

    def banner(self) -> StatusBanner | None:
        if self.error_message:
            return StatusBanner(level="error", message=self.error_message)
        if self.success_message:
            return StatusBanner(level="success", message=self.success_message)
        if self.info_message:
            return StatusBanner(level="info", message=self.info_message)
        return None


class TrackedInteraction:
    """
    An inbound interaction plus everything produced while handling it.

    Holds the request-scoped context and records the one response (reply,
    update or modal) the interaction gets. Extra messages go out as
    follow-ups.
    """

    def __init__(self, interaction: AnyInteraction):
        self.interaction = interaction
        self.context = InteractionContext()
        self.follow_ups: list[View] = []
        self._response: InteractionResponse | None = None
        self._parsed: CustomId | None = None

    @property
    def custom_id(self) -> str | None:
        return self.interaction.custom_id

    @property
    def requester(self) -> Requester:
        return self.interaction.requester

    @property
    def parsed(self) -> CustomId:
        """Decoded custom id. Raises MalformedIdentifierError."""
        if self._parsed is None:
            self._parsed = codec.decode(self.custom_id)
        return self._parsed

    @property
    def responded(self) -> bool:
        return self._response is not None

    @property
    def response(self) -> InteractionResponse | None:
        if self._response is None:
            return None
        return self._response.model_copy(update={"follow_ups": list(self.follow_ups)})

    def require(self, kind: type[InteractionT]) -> InteractionT:
        """Return the interaction as `kind` or fail with a user-visible error."""
        if not isinstance(self.interaction, kind):
            raise EndUserError("Invalid interaction type.")
        return self.interaction

    def get_argument(self, key: ContextKey | str) -> str | None:
        """Look up a value in the custom id arguments first, then in the context."""
        name = key.name if isinstance(key, ContextKey) else key
        try:
            value = self.parsed.get(name)
        except MalformedIdentifierError:
            value = None
        if value is not None:
            return value
        if isinstance(key, ContextKey):
            return self.context.get_raw(key)
        return None

    def _set_response(self, response: InteractionResponse) -> None:
        if self._response is not None:
            raise ConfigurationError("A response was already sent for this interaction")
        self._response = response

    async def respond(self, view: View) -> None:
        """Reply with a new message; once responded, further views become follow-ups."""
        if self.responded:
            self.follow_ups.append(view)
            return
        self._set_response(InteractionResponse(type="reply", view=view))

    async def update(self, view: View) -> None:
        """Replace the message the control lives on, or reply when that is not possible."""
        if not self.interaction.can_update:
            logger.debug(
                f"{type(self.interaction).__name__} cannot update its message, replying instead"
            )
            await self.respond(view)
            return
        self._set_response(InteractionResponse(type="update", view=view))

    async def show_modal(self, modal: Modal) -> None:
        if not self.interaction.can_show_modal:
            raise EndUserError("A form cannot be opened from here.")
        self._set_response(InteractionResponse(type="modal", modal=modal))

    async def follow_up(self, view: View) -> None:
        self.follow_ups.append(view)


class Permission(ABC):
    """
    Access rule evaluated before a screen renders or dispatches.

    Subclasses stay small and focused on one check.
    """

    @abstractmethod
    async def has_permission(self, interaction: TrackedInteraction) -> bool:
        ...


Handler = Callable[[TrackedInteraction], Awaitable[None]]


class Action(ABC):
    """
    A named handler under a screen, dispatching by operation id.

    Subclasses return their operation table from operations() and build their
    re-entrant control in get_component().
    """

    def __init__(self, action_id: str, sub_actions: Sequence["Action"] = ()):
        self.id = _check_id(action_id, "action id")
        self._screen: "Screen | None" = None
        self._sub_actions: list[Action] = list(sub_actions)

    def bind(self, screen: "Screen") -> None:
        if self._screen is not None and self._screen is not screen:
            raise ConfigurationError(
                f"Action '{self.id}' is already bound to screen '{self._screen.id}'"
            )
        self._screen = screen

    @property
    def screen(self) -> "Screen":
        if self._screen is None:
            raise ConfigurationError(f"Action '{self.id}' is not bound to a screen")
        return self._screen

    @property
    def dashboard(self) -> "Dashboard":
        return self.screen.dashboard

    @property
    def full_custom_id(self) -> str:
        return self.custom_id()

    def custom_id(
        self,
        operation: str | None = None,
        args: codec.ArgPairs | None = None,
    ) -> str:
        """Custom id re-entering this action with the given operation and arguments."""
        return codec.encode(
            self.dashboard.id,
            self.screen.id,
            self.id,
            operation,
            args,
        )

    def all_sub_actions(self) -> list["Action"]:
        """
        Sub-actions, for bookkeeping only. Dispatch never reaches them unless the
        screen is given them explicitly.
        """
        return list(self._sub_actions)

    @abstractmethod
    def operations(self) -> Mapping[str, Handler]:
        """Operation id -> coroutine handler."""

    @abstractmethod
    def get_component(self, *args, **kwargs) -> Button | SelectMenu:
        """The control that re-enters this action."""

    async def execute(self, interaction: TrackedInteraction) -> None:
        """
        Run the operation named in the interaction's custom id.

        This is the outermost error boundary: anything raised by a handler or a
        domain collaborator becomes a status response. Exactly one response is
        produced per call.
        """
        try:
            parsed = interaction.parsed
            if parsed.action_id != self.id:
                await self.handle_invalid_interaction(interaction)
                return

            if not parsed.operation_id:
                await self.handle_missing_operation(interaction)
                return

            await self.handle_operation(interaction, parsed.operation_id)
        except Exception as e:
            await status.handle_exception(interaction, e)
        finally:
            if not interaction.responded:
                logger.error(
                    f"Action '{self.id}' finished without responding",
                    extra={"custom_id": interaction.custom_id},
                )
                await status.error(interaction, status.DEFAULT_ERROR_MESSAGE)

    async def handle_operation(self, interaction: TrackedInteraction, operation_id: str) -> None:
        handler = self.operations().get(operation_id)
        if handler is None:
            await self.handle_invalid_operation(interaction, operation_id)
            return
        logger.debug(f"Dispatching {self.id}.{operation_id}")
        await handler(interaction)

    async def handle_invalid_interaction(self, interaction: TrackedInteraction) -> None:
        await status.error(interaction, "🤷 Invalid interaction")

    async def handle_invalid_operation(self, interaction: TrackedInteraction, operation_id: str) -> None:
        await status.error(
            interaction,
            f"🤷 '{operation_id}' operation not found on action {self.full_custom_id}",
        )

    async def handle_missing_operation(self, interaction: TrackedInteraction) -> None:
        await status.error(interaction, "Action operation to perform not found.")


class ScreenRenderAction(Action):
    """Built-in action giving every screen a decodable address."""

    SHOW = "show"

    def __init__(self) -> None:
        super().__init__(RENDER_ACTION_ID)

    def operations(self) -> Mapping[str, Handler]:
        return {self.SHOW: self.show}

    async def show(self, interaction: TrackedInteraction) -> None:
        # Reached through Screen.handle_interaction, which already checked permissions
        await self.screen.show(interaction)

    async def handle_missing_operation(self, interaction: TrackedInteraction) -> None:
        await self.show(interaction)

    def get_component(self, label: str, emoji: str | None = None, style: str = "primary") -> Button:
        return Button(custom_id=self.full_custom_id, label=label, emoji=emoji, style=style)


class Screen(ABC):
    """
    A named UI node owning actions and an access policy.

    Subclasses implement get_response() to build the default view. Permissions
    can be given per instance or as a class attribute; an empty list allows
    everyone.
    """

    permissions: Sequence[Permission] = ()

    def __init__(
        self,
        screen_id: str,
        actions: Sequence[Action] = (),
        sub_screens: Sequence["Screen"] = (),
        permissions: Sequence[Permission] | None = None,
    ):
        self.id = _check_id(screen_id, "screen id")
        self._dashboard: "Dashboard | None" = None
        self._actions: dict[str, Action] = {}
        self._sub_screens: list[Screen] = list(sub_screens)
        if permissions is not None:
            self.permissions = list(permissions)

        self.render_action = ScreenRenderAction()
        self._add_action(self.render_action)
        for action in actions:
            if action.id == RENDER_ACTION_ID:
                raise ConfigurationError(
                    f"Action id '{RENDER_ACTION_ID}' is reserved (screen '{screen_id}')"
                )
            self._add_action(action)

    def _add_action(self, action: Action) -> None:
        if action.id in self._actions:
            raise ConfigurationError(f"Duplicate action '{action.id}' on screen '{self.id}'")
        action.bind(self)
        self._actions[action.id] = action

    def bind(self, dashboard: "Dashboard") -> None:
        if self._dashboard is not None and self._dashboard is not dashboard:
            raise ConfigurationError(
                f"Screen '{self.id}' is already part of dashboard '{self._dashboard.id}'"
            )
        self._dashboard = dashboard

    @property
    def dashboard(self) -> "Dashboard":
        if self._dashboard is None:
            raise ConfigurationError(f"Screen '{self.id}' is not part of a dashboard")
        return self._dashboard

    @property
    def full_custom_id(self) -> str:
        """Custom id that opens this screen's default view."""
        return self.render_action.full_custom_id

    @property
    def actions(self) -> list[Action]:
        return [a for a in self._actions.values() if a is not self.render_action]

    def get_action(self, action_id: str) -> Action | None:
        return self._actions.get(action_id)

    def all_sub_screens(self) -> list["Screen"]:
        """Child screens, depth first."""
        screens: list[Screen] = []
        for screen in self._sub_screens:
            screens.append(screen)
            screens.extend(screen.all_sub_screens())
        return screens

    @abstractmethod
    async def get_response(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        """Build the default view."""

    async def has_interaction_permission(self, interaction: TrackedInteraction) -> bool:
        """All permissions must pass. Any failure inside a check denies access."""
        for permission in self.permissions:
            try:
                if not await permission.has_permission(interaction):
                    return False
            except Exception as e:
                logger.warning(
                    f"Permission {type(permission).__name__} failed on screen '{self.id}': {e}",
                    exc_info=True,
                )
                return False
        return True

    async def handle_permission_denied(self, interaction: TrackedInteraction) -> None:
        logger.info(
            f"Permission denied on screen '{self.id}'",
            extra={"requester": interaction.requester.id},
        )
        await status.permission_denied(interaction)

    async def build_view(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> View:
        view = await self.get_response(interaction, args)
        banner = args.banner() if args else None
        if banner is not None:
            view = view.with_banner(banner)
        return view

    async def render(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> None:
        if not await self.has_interaction_permission(interaction):
            await self.handle_permission_denied(interaction)
            return
        await self.show(interaction, args)

    async def show(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> None:
        """Reply with the default view. Callers are responsible for the permission check."""
        await interaction.respond(await self.build_view(interaction, args))

    async def re_render(self, interaction: TrackedInteraction, args: RenderArgs | None = None) -> None:
        """Default view with a status banner, replacing the current message where possible."""
        if not await self.has_interaction_permission(interaction):
            await self.handle_permission_denied(interaction)
            return
        await interaction.update(await self.build_view(interaction, args))

    async def handle_interaction(self, interaction: TrackedInteraction) -> None:
        if not await self.has_interaction_permission(interaction):
            await self.handle_permission_denied(interaction)
            return

        action_id = interaction.parsed.action_id
        action = self.get_action(action_id)
        if action is None:
            await status.error(interaction, f"Invalid action '{action_id}' for screen '{self.id}'")
            return

        await action.execute(interaction)


class Dashboard:
    """
    Root of a navigation tree. Owns exactly one home screen.
    """

    def __init__(self, dashboard_id: str, home_screen: Screen, screens: Sequence[Screen] = ()):
        self.id = _check_id(dashboard_id, "dashboard id")
        self._home_screen = home_screen
        self._screens: dict[str, Screen] = {}

        for screen in [home_screen, *screens]:
            self._add_screen(screen)
            for sub_screen in screen.all_sub_screens():
                self._add_screen(sub_screen)

    def _add_screen(self, screen: Screen) -> None:
        existing = self._screens.get(screen.id)
        if existing is screen:
            return
        if existing is not None:
            raise ConfigurationError(f"Duplicate screen '{screen.id}' in dashboard '{self.id}'")
        screen.bind(self)
        self._screens[screen.id] = screen

    @property
    def home_screen(self) -> Screen:
        return self._home_screen

    @property
    def screens(self) -> list[Screen]:
        return list(self._screens.values())

    @property
    def full_custom_id(self) -> str:
        return codec.encode_partial(self.id)

    def get_screen(self, screen_id: str) -> Screen | None:
        return self._screens.get(screen_id)

    async def route(self, interaction: TrackedInteraction) -> InteractionResponse:
        """
        Resolve the interaction's custom id and hand it to its screen.

        A missing or undecodable custom id, or one addressed to another
        dashboard, opens the home screen.
        """
        try:
            parsed = interaction.parsed
        except MalformedIdentifierError as e:
            if interaction.custom_id:
                logger.info(f"[Dashboard {self.id}] {e.message}, showing home screen")
            return await self._render_home(interaction)

        if parsed.dashboard_id != self.id:
            logger.warning(
                f"[Dashboard {self.id}] custom id addressed to dashboard '{parsed.dashboard_id}', "
                "showing home screen"
            )
            return await self._render_home(interaction)

        logger.debug(f"[Dashboard {self.id}] Handling interaction {interaction.custom_id}")

        screen = self.get_screen(parsed.screen_id)
        try:
            if screen is None:
                await status.error(interaction, f"🤷 Invalid screen: {parsed.screen_id}")
            else:
                await screen.handle_interaction(interaction)
        except Exception as e:
            await status.handle_exception(interaction, e)

        return self._finish(interaction)

    async def _render_home(self, interaction: TrackedInteraction) -> InteractionResponse:
        try:
            await self._home_screen.render(interaction)
        except Exception as e:
            await status.handle_exception(interaction, e)
        return self._finish(interaction)

    def _finish(self, interaction: TrackedInteraction) -> InteractionResponse:
        response = interaction.response
        if response is None:
            logger.error(f"[Dashboard {self.id}] interaction ended without a response")
            response = InteractionResponse(
                type="reply", view=status.error_view(status.DEFAULT_ERROR_MESSAGE)
            )
        return response
