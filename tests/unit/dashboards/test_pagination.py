"""Unit tests for pagination helpers and PaginatedAction."""

import pytest

from src.core import custom_id as codec
from src.core.context import ContextKey
from src.core.exceptions import ConfigurationError, InvalidPageError
from src.core.limits import ROWS_PER_VIEW_MAX
from src.dashboards import status
from src.dashboards.base import Dashboard
from src.dashboards.pagination import (
    EMPTY_MESSAGE,
    NEXT_LABEL,
    PREVIOUS_LABEL,
    SelectionPaginator,
    build_navigation_controls,
    clamp_page,
    get_current_page,
    get_total_pages,
)
from src.models.contracts.views import Button, ControlRow, SelectOption, View
from tests.helpers.factories import (
    EchoAction,
    ItemsPaginator,
    StaticScreen,
    build_test_dashboard,
    make_tracked,
)

BASE = codec.decode("test:list:items:paginate")


def _labels_and_pages(row):
    return [(c.label, codec.get_named_argument(c.custom_id, "page")) for c in row.controls]


class TestGetTotalPages:
    """Tests for get_total_pages()."""

    @pytest.mark.parametrize(
        "size,page_size,expected",
        [(0, 25, 0), (1, 25, 1), (25, 25, 1), (26, 25, 2), (12, 5, 3)],
    )
    def test_ceiling(self, size, page_size, expected):
        assert get_total_pages(size, page_size) == expected

    def test_non_positive_page_size(self):
        with pytest.raises(ConfigurationError):
            get_total_pages(10, 0)

    def test_negative_size(self):
        with pytest.raises(ConfigurationError):
            get_total_pages(-1, 5)


class TestGetCurrentPage:
    """Tests for get_current_page()."""

    def test_absent_is_first_page(self):
        assert get_current_page("test:list:items:paginate") == 0

    def test_reads_page_argument(self):
        assert get_current_page("test:list:items:paginate:page:3") == 3

    def test_accepts_decoded_id(self):
        assert get_current_page(BASE.with_args([("page", "2")])) == 2

    @pytest.mark.parametrize("value", ["abc", "-1", "1.5", "²"])
    def test_invalid_page(self, value):
        with pytest.raises(InvalidPageError):
            get_current_page(f"test:list:items:paginate:page:{value}")

    def test_clamp_page(self):
        assert clamp_page(7, 3) == 2
        assert clamp_page(-1, 3) == 0
        assert clamp_page(4, 0) == 0


class TestBuildNavigationControls:
    """Tests for build_navigation_controls()."""

    def test_single_page_has_no_controls(self):
        assert build_navigation_controls(BASE, 0, 1) is None
        assert build_navigation_controls(BASE, 0, 0) is None

    def test_first_page_only_next(self):
        row = build_navigation_controls(BASE, 0, 5)
        assert _labels_and_pages(row) == [(NEXT_LABEL, "1")]

    def test_last_page_only_previous(self):
        row = build_navigation_controls(BASE, 4, 5)
        assert _labels_and_pages(row) == [(PREVIOUS_LABEL, "3")]

    def test_middle_page_both(self):
        row = build_navigation_controls(BASE, 2, 5)
        assert _labels_and_pages(row) == [(PREVIOUS_LABEL, "1"), (NEXT_LABEL, "3")]

    def test_existing_page_argument_replaced(self):
        row = build_navigation_controls(BASE.with_args([("rId", "9"), ("page", "2")]), 2, 5)
        for control in row.controls:
            parsed = codec.decode(control.custom_id)
            assert parsed.get("rId") == "9"
            assert parsed.args[-1][0] == "page"

    def test_controls_reenter_same_action(self):
        row = build_navigation_controls(BASE, 1, 3)
        for control in row.controls:
            parsed = codec.decode(control.custom_id)
            assert (parsed.dashboard_id, parsed.screen_id, parsed.action_id, parsed.operation_id) == (
                "test", "list", "items", "paginate",
            )


class TestPaginatedAction:
    """Tests for the paginate operation end to end through a dashboard."""

    @pytest.mark.asyncio
    async def test_first_page(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:list:items:paginate"))

        assert response.type == "update"
        assert [f.value for f in response.view.fields] == [f"item-{i}" for i in range(5)]
        nav = response.view.rows[-1]
        assert _labels_and_pages(nav) == [(NEXT_LABEL, "1")]
        assert response.view.banner is None

    @pytest.mark.asyncio
    async def test_middle_page(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:list:items:paginate:page:1"))

        assert [f.value for f in response.view.fields] == [f"item-{i}" for i in range(5, 10)]
        assert _labels_and_pages(response.view.rows[-1]) == [(PREVIOUS_LABEL, "0"), (NEXT_LABEL, "2")]

    @pytest.mark.asyncio
    async def test_stale_page_is_clamped_with_banner(self):
        """The list shrank between render and click."""
        dashboard = build_test_dashboard(items=["a", "b", "c"])
        response = await dashboard.route(make_tracked("button", "test:list:items:paginate:page:2"))

        assert [f.value for f in response.view.fields] == ["a", "b", "c"]
        assert response.view.banner.level == "info"
        assert "page 1 of 1" in response.view.banner.message
        assert response.view.rows == []

    @pytest.mark.asyncio
    async def test_empty_collection(self):
        dashboard = build_test_dashboard(items=[])
        response = await dashboard.route(make_tracked("button", "test:list:items:paginate:page:3"))

        assert response.view.description == EMPTY_MESSAGE
        assert response.view.rows == []

    @pytest.mark.asyncio
    async def test_invalid_page_gets_generic_error(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:list:items:paginate:page:x"))

        assert response.type == "reply"
        assert response.view.color == "#ff0000"

    @pytest.mark.asyncio
    async def test_force_reply(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(
            make_tracked("button", "test:list:items:paginate:fRp:yes")
        )
        assert response.type == "reply"

    @pytest.mark.asyncio
    async def test_required_arguments_carried_on_navigation(self):
        dashboard = build_test_dashboard()
        paginator = dashboard.get_screen("list").get_action("items")
        paginator.required_arguments = [ContextKey("rId")]

        response = await dashboard.route(make_tracked("button", "test:list:items:paginate:rId:4"))

        next_id = response.view.rows[-1].controls[0].custom_id
        assert next_id == "test:list:items:paginate:rId:4:page:1"

    @pytest.mark.asyncio
    async def test_missing_required_argument(self):
        dashboard = build_test_dashboard()
        paginator = dashboard.get_screen("list").get_action("items")
        paginator.required_arguments = [ContextKey("rId")]

        response = await dashboard.route(make_tracked("button", "test:list:items:paginate"))

        assert "'rId' is required" in response.view.description


class CrowdedItemsPaginator(ItemsPaginator):
    """Renders `extra_rows` rows of its own before navigation is added."""

    def __init__(self, items, extra_rows: int):
        super().__init__(items, page_size=5, action_id="crowded")
        self.extra_rows = extra_rows

    async def render_page(self, interaction, page):
        rows = [
            ControlRow(controls=[Button(custom_id=self.custom_id("paginate"), label=f"Row {i}")])
            for i in range(self.extra_rows)
        ]
        return View(title=self.title, rows=rows)


def _crowded_dashboard(extra_rows: int) -> Dashboard:
    paginator = CrowdedItemsPaginator([f"item-{i}" for i in range(12)], extra_rows)
    return Dashboard("test", StaticScreen("home", actions=[paginator]))


class TestNavigationRowCap:
    """The navigation row never pushes a page past the row limit."""

    @pytest.mark.asyncio
    async def test_navigation_fills_last_free_row(self):
        dashboard = _crowded_dashboard(ROWS_PER_VIEW_MAX - 1)
        response = await dashboard.route(make_tracked("button", "test:home:crowded:paginate"))

        assert len(response.view.rows) == ROWS_PER_VIEW_MAX
        assert response.view.rows[-1].controls[0].label == NEXT_LABEL
        View.model_validate(response.view.model_dump())

    @pytest.mark.asyncio
    async def test_full_page_is_rejected_not_overfilled(self):
        dashboard = _crowded_dashboard(ROWS_PER_VIEW_MAX)
        response = await dashboard.route(make_tracked("button", "test:home:crowded:paginate"))

        assert status.DEFAULT_ERROR_MESSAGE in response.view.description
        assert len(response.view.rows) <= ROWS_PER_VIEW_MAX

    def test_with_navigation_raises_for_full_view(self):
        dashboard = _crowded_dashboard(0)
        paginator = dashboard.home_screen.get_action("crowded")
        full = View(
            rows=[ControlRow(controls=[Button(custom_id="test:home:x", label="x")])] * ROWS_PER_VIEW_MAX
        )
        nav = build_navigation_controls(BASE, 0, 2)

        with pytest.raises(ConfigurationError):
            paginator.with_navigation(full, nav)


class TestSelectionPaginator:
    def test_get_items_is_required(self):
        class NoItems(SelectionPaginator):
            def to_option(self, item):
                return SelectOption(label=str(item), value=str(item))

        destination = EchoAction("dest")
        with pytest.raises(TypeError):
            NoItems("pick", destination, "ping")
