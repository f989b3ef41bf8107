"""Shared fixtures: style snapshots and fake Playwright objects."""

from typing import Any, Dict, List, Optional

import pytest
import structlog

from page_theme.cascade import cascade_selectors
from page_theme.document import StyleSnapshot
from page_theme.inject import (
    BUILD_PANEL_SCRIPT,
    ELEMENT_DEFINED_SCRIPT,
    LAYOUT_CANDIDATES_SCRIPT,
    MOUNT_WIDGET_SCRIPT,
    REMOVE_PANEL_SCRIPT,
)

TRANSPARENT = "rgba(0, 0, 0, 0)"


@pytest.fixture(autouse=True)
def reset_logging():
    # The CLI binds structlog to the captured stderr of the test that ran it.
    yield
    structlog.reset_defaults()


def element(
    background: str = TRANSPARENT,
    color: str = "rgb(51, 51, 51)",
    border_color: str = "rgb(51, 51, 51)",
    border_style: str = "none",
    border_width: str = "0px",
    radius: str = "0px",
) -> Dict[str, str]:
    return {
        "background-color": background,
        "color": color,
        "border-top-color": border_color,
        "border-top-style": border_style,
        "border-top-width": border_width,
        "border-radius": radius,
    }


def make_snapshot(
    background: str = "rgb(255, 255, 255)",
    color: str = "rgb(51, 51, 51)",
    font_family: str = '"Inter", "Segoe UI", sans-serif',
    font_size: str = "16px",
    surface_background: str = TRANSPARENT,
    elements: Optional[Dict[str, Dict[str, str]]] = None,
    prefers_dark: Optional[bool] = None,
) -> StyleSnapshot:
    """Snapshot where every cascade selector is captured and unmatched by default."""
    matches: Dict[str, Optional[Dict[str, str]]] = {s: None for s in cascade_selectors()}
    matches.update(elements or {})
    return StyleSnapshot(
        root={
            "background-color": background,
            "color": color,
            "font-family": font_family,
            "font-size": font_size,
        },
        surface={"background-color": surface_background},
        matches=matches,
        prefers_dark=prefers_dark,
        url="https://example.test/",
    )


class FakeHandle:
    """Element handle that keeps an inline style map."""

    def __init__(self, style: Optional[Dict[str, str]] = None):
        self.style: Dict[str, str] = dict(style or {})
        self.attributes: Dict[str, str] = {}
        self.calls = 0

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.calls += 1
        for name in arg["remove"]:
            self.style.pop(name, None)
        self.style.update(arg["values"])
        self.attributes["data-widget-theme-version"] = arg["version"]
        return len(arg["values"])


class FakePage:
    """Just enough of ``playwright.async_api.Page`` for the injector."""

    def __init__(self, candidates: Optional[List[Dict[str, Any]]] = None, defined: bool = False):
        self.url = "https://example.test/"
        self.candidates = candidates or []
        self.defined = defined
        self.bundle_error: Optional[Exception] = None
        self.elements: Dict[str, FakeHandle] = {}
        self.panel_args: Optional[Dict[str, Any]] = None
        self.panel_state: Optional[str] = None
        self.removed: List[str] = []
        self.script_tags: List[str] = []
        self.mounted: List[Dict[str, Any]] = []

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == LAYOUT_CANDIDATES_SCRIPT:
            return self.candidates
        if script == BUILD_PANEL_SCRIPT:
            self.panel_args = arg
            self.panel_state = arg["initial"]
            return True
        if script == REMOVE_PANEL_SCRIPT:
            self.removed.extend(arg)
            self.panel_state = None
            return None
        if script == ELEMENT_DEFINED_SCRIPT:
            return self.defined
        if script == MOUNT_WIDGET_SCRIPT:
            self.mounted.append(arg)
            return True
        raise AssertionError("unexpected script")

    async def add_script_tag(self, url: str = None, **kwargs: Any) -> None:
        if self.bundle_error is not None:
            raise self.bundle_error
        self.script_tags.append(url)
        self.defined = True

    async def query_selector(self, selector: str) -> Optional[FakeHandle]:
        return self.elements.get(selector)

    async def get_attribute(self, selector: str, name: str) -> Optional[str]:
        assert name == "data-state"
        return self.panel_state

    async def click(self, selector: str) -> None:
        ids = self.panel_args["ids"]
        if selector == f"#{ids['toggle']}":
            self.panel_state = "expanded"
        elif selector == f"#{ids['close']}":
            self.panel_state = "collapsed"
