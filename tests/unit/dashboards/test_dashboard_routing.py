"""Unit tests for Dashboard construction and routing."""

import pytest

from src.core.exceptions import ConfigurationError
from src.dashboards import status
from src.dashboards.base import Dashboard, RenderArgs
from tests.helpers.factories import StaticScreen, build_test_dashboard, make_tracked


class TestRoute:
    """Tests for Dashboard.route()."""

    @pytest.mark.parametrize("requester_id", ["user-1", "admin-1", "someone-else"])
    @pytest.mark.asyncio
    async def test_no_custom_id_opens_home(self, requester_id):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("open", None, requester_id=requester_id))

        assert response.type == "reply"
        assert response.view.title == "Home"
        assert response.view.custom_ids() == ["test:home:echo:ping"]

    @pytest.mark.parametrize("custom_id", ["garbage", "test:home", "test:home:echo:ping:orphan"])
    @pytest.mark.asyncio
    async def test_malformed_id_opens_home(self, custom_id):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", custom_id))
        assert response.view.title == "Home"

    @pytest.mark.asyncio
    async def test_other_dashboard_opens_home(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "elsewhere:home:screen"))
        assert response.view.title == "Home"

    @pytest.mark.asyncio
    async def test_screen_render(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:list:screen"))
        assert response.view.title == "List"

    @pytest.mark.asyncio
    async def test_screen_show_operation(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:list:screen:show"))
        assert response.view.title == "List"

    @pytest.mark.asyncio
    async def test_invalid_screen(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:nope:screen"))
        assert "🤷 Invalid screen: nope" in response.view.description

    @pytest.mark.asyncio
    async def test_invalid_action(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:home:nope:ping"))
        assert "Invalid action 'nope' for screen 'home'" in response.view.description

    @pytest.mark.asyncio
    async def test_action_dispatch(self):
        dashboard = build_test_dashboard()
        response = await dashboard.route(make_tracked("button", "test:home:echo:ping"))
        assert response.view.description == "pong"

    @pytest.mark.asyncio
    async def test_home_failure_is_contained(self):
        class BrokenScreen(StaticScreen):
            async def get_response(self, interaction, args=None):
                raise RuntimeError("boom")

        dashboard = Dashboard("test", BrokenScreen("home"))
        response = await dashboard.route(make_tracked("open", None))

        assert status.DEFAULT_ERROR_MESSAGE in response.view.description


class TestRenderArgs:
    @pytest.mark.asyncio
    async def test_banner_overlay(self):
        dashboard = build_test_dashboard()
        interaction = make_tracked("button", "test:home:screen")

        await dashboard.home_screen.re_render(interaction, RenderArgs(success_message="Saved"))

        assert interaction.response.type == "update"
        assert interaction.response.view.banner.level == "success"
        assert interaction.response.view.banner.message == "Saved"

    def test_error_wins_over_success(self):
        banner = RenderArgs(success_message="ok", error_message="bad").banner()
        assert banner.level == "error"

    def test_no_messages_no_banner(self):
        assert RenderArgs().banner() is None


class TestConstruction:
    """Tests for building the navigation tree."""

    def test_collects_nested_sub_screens(self):
        leaf = StaticScreen("leaf")
        middle = StaticScreen("middle", sub_screens=[leaf])
        home = StaticScreen("home", sub_screens=[middle])

        dashboard = Dashboard("test", home)

        assert [s.id for s in dashboard.screens] == ["home", "middle", "leaf"]
        assert leaf.full_custom_id == "test:leaf:screen"
        assert dashboard.full_custom_id == "test"

    def test_same_screen_listed_twice_is_fine(self):
        child = StaticScreen("child")
        home = StaticScreen("home", sub_screens=[child])
        dashboard = Dashboard("test", home, screens=[child])
        assert dashboard.get_screen("child") is child

    def test_duplicate_screen_id(self):
        home = StaticScreen("home", sub_screens=[StaticScreen("dup")])
        with pytest.raises(ConfigurationError):
            Dashboard("test", home, screens=[StaticScreen("dup")])

    def test_screen_belongs_to_one_dashboard(self):
        shared = StaticScreen("shared")
        Dashboard("one", StaticScreen("home"), screens=[shared])
        with pytest.raises(ConfigurationError):
            Dashboard("two", StaticScreen("home"), screens=[shared])

    def test_unbound_screen(self):
        with pytest.raises(ConfigurationError):
            StaticScreen("loose").full_custom_id
