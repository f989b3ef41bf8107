"""Tests for snapshot capture against a scripted page."""

import pytest
from playwright.async_api import Error as PlaywrightError

from page_theme.browser import MATCH_SCRIPT, ROOT_SCRIPT, capture_snapshot, chunked
from page_theme.cascade import cascade_selectors
from page_theme.errors import DocumentUnavailableError
from page_theme.extractor import extract_tokens

ROOT = {
    "url": "https://example.test/",
    "root": {
        "background-color": "rgb(255, 255, 255)",
        "color": "rgb(51, 51, 51)",
        "font-family": "Inter, sans-serif",
        "font-size": "16px",
    },
    "surface": {"background-color": "rgba(0, 0, 0, 0)"},
    "prefers_dark": False,
}


class ScriptedPage:
    def __init__(self, root=ROOT, styles=None, fail_on=None):
        self.root = root
        self.styles = styles or {}
        self.fail_on = fail_on
        self.match_calls = []

    async def evaluate(self, script, arg=None):
        if script == self.fail_on:
            raise PlaywrightError("Execution context was destroyed")
        if script == ROOT_SCRIPT:
            return self.root
        if script == MATCH_SCRIPT:
            self.match_calls.append(list(arg["selectors"]))
            return {s: self.styles.get(s) for s in arg["selectors"]}
        raise AssertionError("unexpected script")


def test_chunked():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 3)) == []


@pytest.mark.asyncio
async def test_selectors_are_split_across_calls():
    page = ScriptedPage()
    selectors = cascade_selectors()

    snapshot = await capture_snapshot(page, chunk_size=5)

    assert [s for call in page.match_calls for s in call] == selectors
    assert all(len(call) <= 5 for call in page.match_calls)
    assert len(page.match_calls) == -(-len(selectors) // 5)
    assert set(snapshot.matches) == set(selectors)


@pytest.mark.asyncio
async def test_captured_snapshot_feeds_extractor():
    page = ScriptedPage(styles={
        "button:not([disabled])": {
            "background-color": "rgb(102, 126, 234)",
            "border-top-style": "none",
            "border-radius": "8px",
        },
        "button": {"border-radius": "8px"},
    })

    tokens = extract_tokens(await capture_snapshot(page))

    assert tokens.primary_color == "#667eea"
    assert tokens.corner_radius == "8px"
    assert tokens.font_family == ("Inter", "sans-serif")


@pytest.mark.asyncio
async def test_missing_body_is_fatal():
    with pytest.raises(DocumentUnavailableError):
        await capture_snapshot(ScriptedPage(root=None))


@pytest.mark.asyncio
async def test_rejected_inspection_is_fatal():
    page = ScriptedPage(fail_on=MATCH_SCRIPT)
    with pytest.raises(DocumentUnavailableError):
        await capture_snapshot(page)
    assert page.match_calls == []
