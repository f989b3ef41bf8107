"""Tests for theme application and preview panel injection."""

import pytest
from playwright.async_api import Error as PlaywrightError

from page_theme import vocabulary as v
from page_theme.errors import NoLayoutContainerError, WidgetBundleError, WidgetNotFoundError
from page_theme.inject import (
    apply_theme_in_place,
    apply_theme_to_selector,
    build_injected_panel,
    build_overlay_panel,
    choose_layout_container,
    script_widget_factory,
    style_writes,
)
from page_theme.panel import InjectedPanelSpec, PanelState
from page_theme.vocabulary import WIDGET_VARIABLES, ThemeVariableMap

from .conftest import FakeHandle, FakePage

LAYOUT = [
    {"selector": "body > header", "width": 1440, "height": 64, "depth": 2, "position": "sticky"},
    {"selector": "body > div.app", "width": 1440, "height": 900, "depth": 2, "position": "static"},
    {"selector": "body > div.app > main", "width": 1440, "height": 900, "depth": 3, "position": "static"},
    {"selector": "body > div.toast", "width": 1440, "height": 900, "depth": 1, "position": "fixed"},
]


class TestApplyTheme:
    def test_style_writes_remove_everything_not_set(self):
        values, remove = style_writes(ThemeVariableMap({v.BACKGROUND: "#fff"}))
        assert values == {v.BACKGROUND: "#fff"}
        assert set(remove) == set(WIDGET_VARIABLES) - {v.BACKGROUND}

    @pytest.mark.asyncio
    async def test_reapplying_replaces_previous_theme(self):
        handle = FakeHandle()
        await apply_theme_in_place(handle, ThemeVariableMap({
            v.BACKGROUND: "#ffffff",
            v.PRIMARY: "#1d4ed8",
            v.ACCENT: "#facc15",
        }))
        await apply_theme_in_place(handle, ThemeVariableMap({v.BACKGROUND: "#111827"}))

        assert handle.style == {v.BACKGROUND: "#111827"}
        assert handle.attributes["data-widget-theme-version"] == v.WIDGET_VOCABULARY_VERSION

    @pytest.mark.asyncio
    async def test_host_page_styles_are_untouched(self):
        handle = FakeHandle({"margin": "0", "color": "red"})
        await apply_theme_in_place(handle, ThemeVariableMap({v.RADIUS: "8px"}))
        assert handle.style == {"margin": "0", "color": "red", v.RADIUS: "8px"}

    @pytest.mark.asyncio
    async def test_missing_widget(self):
        with pytest.raises(WidgetNotFoundError):
            await apply_theme_to_selector(FakePage(), "chat-widget", ThemeVariableMap({}))

    @pytest.mark.asyncio
    async def test_apply_by_selector(self):
        page = FakePage()
        page.elements["chat-widget"] = FakeHandle()
        count = await apply_theme_to_selector(page, "chat-widget", ThemeVariableMap({v.RADIUS: "8px"}))
        assert count == 1


class TestLayoutContainer:
    def test_widest_then_tallest_then_outermost(self):
        chosen = choose_layout_container(LAYOUT)
        assert chosen["selector"] == "body > div.app"

    def test_fixed_containers_are_ignored(self):
        assert choose_layout_container([LAYOUT[3]]) is None

    def test_no_candidates(self):
        assert choose_layout_container([]) is None

    @pytest.mark.asyncio
    async def test_missing_container_is_reported_distinctly(self):
        with pytest.raises(NoLayoutContainerError):
            await build_injected_panel(FakePage(candidates=[]))


class TestPanel:
    @pytest.mark.asyncio
    async def test_panel_appended_to_chosen_container_collapsed(self):
        page = FakePage(candidates=LAYOUT)
        panel = await build_injected_panel(page, spec=InjectedPanelSpec(expanded_width="360px"))

        assert page.panel_args["containerSelector"] == "body > div.app"
        assert page.panel_args["styles"]["expanded"]["panel"]["width"] == "360px"
        assert await panel.state() is PanelState.COLLAPSED

    @pytest.mark.asyncio
    async def test_toggle_round_trip(self):
        page = FakePage(candidates=LAYOUT)
        panel = await build_injected_panel(page)

        assert await panel.toggle() is PanelState.EXPANDED
        assert await panel.state() is PanelState.EXPANDED
        assert await panel.toggle() is PanelState.COLLAPSED
        assert await panel.state() is PanelState.COLLAPSED

    @pytest.mark.asyncio
    async def test_overlay_fallback(self):
        page = FakePage()
        panel = await build_overlay_panel(page)

        assert page.panel_args["containerSelector"] is None
        assert page.panel_args["styles"]["collapsed"]["panel"]["position"] == "fixed"
        assert panel.overlay

    @pytest.mark.asyncio
    async def test_remove(self):
        page = FakePage(candidates=LAYOUT)
        spec = InjectedPanelSpec()
        panel = await build_injected_panel(page, spec=spec)
        await panel.remove()
        assert page.removed == [spec.panel_id, spec.toggle_id]


class TestWidgetFactory:
    @pytest.mark.asyncio
    async def test_bundle_loaded_once_and_widget_mounted(self):
        page = FakePage(candidates=LAYOUT)
        factory = script_widget_factory("https://cdn.example.test/widget.js", "chat-widget", {"mode": "preview"})

        panel = await build_injected_panel(page, factory)
        await factory(page, panel.mount_selector)

        assert page.script_tags == ["https://cdn.example.test/widget.js"]
        assert panel.widget_selector == f"{panel.mount_selector} > chat-widget"
        assert page.mounted[0]["attributes"] == {"mode": "preview"}

    @pytest.mark.asyncio
    async def test_bundle_failure_is_surfaced(self):
        page = FakePage(candidates=LAYOUT)
        page.bundle_error = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        factory = script_widget_factory("https://cdn.example.test/widget.js", "chat-widget")

        with pytest.raises(WidgetBundleError):
            await build_injected_panel(page, factory)
