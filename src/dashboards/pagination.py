"""
Pagination

Page state lives entirely in the custom id: the current page is the trailing
`page` argument, the page count is recomputed from the collection on every
request. Nothing is stored between clicks.

Stale links (a page index at or past the current page count, e.g. after an
item was deleted between render and click) are clamped to the last valid page
and the view gets an info banner saying so. Every paginator applies the same
policy through PaginatedAction.load_page().
"""

import logging
import math
from abc import abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from src.core import custom_id as codec
from src.core import limits
from src.core.context import ContextKey
from src.core.custom_id import CustomId
from src.core.exceptions import ConfigurationError, InvalidPageError, NotFoundError
from src.dashboards.base import Action, Handler, TrackedInteraction
from src.models.contracts.views import (
    Button,
    ButtonStyle,
    ControlRow,
    SelectMenu,
    SelectOption,
    StatusBanner,
    View,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_ARG = "page"
PAGINATE_OPERATION = "paginate"
FORCE_REPLY_ARG = "fRp"
TRUE = "yes"

DEFAULT_PAGE_SIZE = limits.SELECT_OPTIONS_MAX

PREVIOUS_LABEL = "Previous"
NEXT_LABEL = "Next"

STALE_PAGE_MESSAGE = "This list changed since it was shown. Showing page {page} of {total}."
EMPTY_MESSAGE = "Nothing to show here yet."


def get_current_page(identifier: str | CustomId) -> int:
    """
    Page index carried in the `page` argument; 0 when absent.

    Raises:
        InvalidPageError: The argument is present but not a non-negative integer
    """
    parsed = codec.decode(identifier) if isinstance(identifier, str) else identifier
    raw = parsed.get(PAGE_ARG)
    if raw is None:
        return 0
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidPageError(raw)
    return int(raw)


def get_total_pages(collection_size: int, page_size: int) -> int:
    """
    ceil(collection_size / page_size). An empty collection has 0 pages.

    Raises:
        ConfigurationError: page_size is not positive or collection_size is negative
    """
    if page_size <= 0:
        raise ConfigurationError(f"Page size must be positive, got {page_size}")
    if collection_size < 0:
        raise ConfigurationError(f"Collection size cannot be negative, got {collection_size}")
    return math.ceil(collection_size / page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Nearest valid page index; 0 when there are no pages."""
    if total_pages <= 0:
        return 0
    return min(max(page, 0), total_pages - 1)


def build_navigation_controls(
    base: CustomId,
    current_page: int,
    total_pages: int,
) -> ControlRow | None:
    """
    Previous/Next buttons for a paginated view.

    Args:
        base: Custom id of the paginating operation, without the page argument
            (an existing page argument is replaced)
        current_page: Page being shown
        total_pages: Page count

    Returns:
        A row with "Previous" when current_page > 0 and "Next" when
        current_page < total_pages - 1, or None when there is at most one page
    """
    if total_pages <= 1:
        return None

    base = base.without_arg(PAGE_ARG)
    controls: list[Button] = []

    if current_page > 0:
        controls.append(
            Button(
                custom_id=base.with_args([(PAGE_ARG, str(current_page - 1))]).encode(),
                label=PREVIOUS_LABEL,
                style="secondary",
            )
        )

    if current_page < total_pages - 1:
        controls.append(
            Button(
                custom_id=base.with_args([(PAGE_ARG, str(current_page + 1))]).encode(),
                label=NEXT_LABEL,
                style="secondary",
            )
        )

    if not controls:
        return None
    return ControlRow(controls=controls)


@dataclass
class PageState(Generic[T]):
    """One resolved page."""

    items: list[T] = field(default_factory=list)
    number: int = 0
    total_pages: int = 0
    total_items: int = 0
    requested: int = 0

    @property
    def stale(self) -> bool:
        """The requested page no longer exists and was clamped."""
        return self.requested != self.number

    @property
    def empty(self) -> bool:
        return self.total_pages == 0


class PaginatedAction(Action):
    """
    Action paginating a collection through the `paginate` operation.

    Subclasses provide the item count, one page of items and the view for a
    page; the base adds navigation, clamps stale pages and renders the empty
    state.

    required_arguments are looked up in the custom id and then in the context
    and are carried on every navigation control, so later pages still know
    e.g. which funding round they belong to.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    title: str = ""
    empty_message: str = EMPTY_MESSAGE
    required_arguments: Sequence[ContextKey] = ()

    @abstractmethod
    async def get_total_items(self, interaction: TrackedInteraction) -> int:
        ...

    @abstractmethod
    async def get_items_for_page(self, interaction: TrackedInteraction, page: int) -> Sequence[Any]:
        ...

    @abstractmethod
    async def render_page(self, interaction: TrackedInteraction, page: PageState) -> View:
        """View for a non-empty page, without the navigation row (leave one row free for it)."""

    def operations(self) -> Mapping[str, Handler]:
        return {PAGINATE_OPERATION: self.handle_pagination}

    def get_component(self, label: str = "Browse", style: ButtonStyle = "primary") -> Button:
        return Button(custom_id=self.custom_id(PAGINATE_OPERATION), label=label, style=style)

    def pagination_args(self, interaction: TrackedInteraction) -> list[tuple[str, str]]:
        args = []
        for key in self.required_arguments:
            value = interaction.get_argument(key)
            if value is None:
                raise NotFoundError(f"'{key.name}' is required to show this list")
            args.append((key.name, value))
        return args

    def pagination_base(self, interaction: TrackedInteraction) -> CustomId:
        return codec.decode(self.custom_id(PAGINATE_OPERATION, self.pagination_args(interaction)))

    def requested_page(self, interaction: TrackedInteraction) -> int:
        """
        Page asked for by the custom id. Only this action's own ids carry our
        page; when another action hands over, start at the first page.
        """
        parsed = interaction.parsed
        if parsed.action_id != self.id or parsed.screen_id != self.screen.id:
            return 0
        return get_current_page(parsed)

    async def load_page(self, interaction: TrackedInteraction) -> PageState:
        requested = self.requested_page(interaction)
        total_items = await self.get_total_items(interaction)
        total_pages = get_total_pages(total_items, self.page_size)
        number = clamp_page(requested, total_pages)

        if number != requested:
            logger.info(
                f"Page {requested} of '{self.id}' out of range ({total_pages} pages), clamped to {number}"
            )

        items = list(await self.get_items_for_page(interaction, number)) if total_pages else []
        return PageState(
            items=items,
            number=number,
            total_pages=total_pages,
            total_items=total_items,
            requested=requested,
        )

    def with_navigation(self, view: View, nav: ControlRow) -> View:
        """
        Append the navigation row. render_page must leave one row free for it.

        Raises:
            ConfigurationError: The page view already uses every row
        """
        if len(view.rows) >= limits.ROWS_PER_VIEW_MAX:
            raise ConfigurationError(
                f"'{self.id}' rendered {len(view.rows)} rows, leaving no room for navigation "
                f"(max {limits.ROWS_PER_VIEW_MAX})"
            )
        return View.model_validate({**view.model_dump(), "rows": [*view.rows, nav]})

    def empty_view(self, interaction: TrackedInteraction) -> View:
        return View(title=self.title or None, description=self.empty_message)

    async def handle_pagination(self, interaction: TrackedInteraction) -> None:
        state = await self.load_page(interaction)

        if state.empty:
            view = self.empty_view(interaction)
        else:
            view = await self.render_page(interaction, state)
            nav = build_navigation_controls(
                self.pagination_base(interaction), state.number, state.total_pages
            )
            if nav is not None:
                view = self.with_navigation(view, nav)
            if state.stale:
                view = view.with_banner(
                    StatusBanner(
                        level="info",
                        message=STALE_PAGE_MESSAGE.format(
                            page=state.number + 1, total=state.total_pages
                        ),
                    )
                )

        await self.send_page(interaction, view)

    async def send_page(self, interaction: TrackedInteraction, view: View) -> None:
        if interaction.get_argument(FORCE_REPLY_ARG) == TRUE:
            await interaction.respond(view)
        else:
            await interaction.update(view)


class SelectionPaginator(PaginatedAction, Generic[T]):
    """
    Paginated select menu; the chosen value is delivered to another action.

    The destination receives a SelectInteraction whose custom id names
    `destination_operation` and carries `destination_args` plus the
    paginator's required arguments.

    Subclasses implement get_items() and to_option(). Collections too large
    to load at once also override get_total_items()/get_items_for_page();
    get_items() is only called by the default versions of those two.
    """

    placeholder: str = "Select an item"
    description: str = "To continue, select an item from the list below"

    def __init__(
        self,
        action_id: str,
        destination: Action,
        destination_operation: str,
        destination_args: codec.ArgPairs | None = None,
        title: str | None = None,
    ):
        super().__init__(action_id)
        self.destination = destination
        self.destination_operation = destination_operation
        self.destination_args = list(codec.arg_pairs(destination_args))
        if title is not None:
            self.title = title

    @abstractmethod
    async def get_items(self, interaction: TrackedInteraction) -> Sequence[T]:
        """Every selectable item, in display order."""

    @abstractmethod
    def to_option(self, item: T) -> SelectOption:
        ...

    async def get_total_items(self, interaction: TrackedInteraction) -> int:
        return len(await self.get_items(interaction))

    async def get_items_for_page(self, interaction: TrackedInteraction, page: int) -> Sequence[T]:
        items = await self.get_items(interaction)
        start = page * self.page_size
        return items[start:start + self.page_size]

    def destination_custom_id(self, interaction: TrackedInteraction) -> str:
        args = dict(self.destination_args)
        args.update(self.pagination_args(interaction))
        return self.destination.custom_id(self.destination_operation, args)

    async def render_page(self, interaction: TrackedInteraction, page: PageState) -> View:
        menu = SelectMenu(
            custom_id=self.destination_custom_id(interaction),
            placeholder=limits.truncate(self.placeholder, limits.SELECT_PLACEHOLDER_MAX),
            options=[self.to_option(item) for item in page.items],
        )
        description = self.description
        if page.total_pages > 1:
            description = f"{description}\n\nPage {page.number + 1} of {page.total_pages}"
        return View(
            title=limits.truncate(self.title, limits.TITLE_MAX) if self.title else None,
            description=description,
            rows=[ControlRow(controls=[menu])],
        )
