"""Playwright glue: load pages, capture style snapshots, take screenshots."""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from playwright.async_api import Browser, BrowserContext, Error as PlaywrightError, Page

from . import config
from .cascade import cascade_selectors
from .document import StyleSnapshot
from .errors import DocumentUnavailableError
from .log import get_logger

logger = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

ROOT_SCRIPT = """(props) => {
    if (typeof document === 'undefined' || !document.body) {
        return null;
    }
    const pick = (el) => {
        const computed = window.getComputedStyle(el);
        const result = {};
        props.forEach(p => { result[p] = computed.getPropertyValue(p); });
        return result;
    };
    let prefersDark = null;
    if (window.matchMedia) {
        if (window.matchMedia('(prefers-color-scheme: dark)').matches) {
            prefersDark = true;
        } else if (window.matchMedia('(prefers-color-scheme: light)').matches) {
            prefersDark = false;
        }
    }
    return {
        url: window.location.href,
        root: pick(document.body),
        surface: pick(document.documentElement),
        prefers_dark: prefersDark,
    };
}"""

MATCH_SCRIPT = """({selectors, props}) => {
    const result = {};
    selectors.forEach(selector => {
        let el = null;
        try {
            el = document.querySelector(selector);
        } catch (e) {
            el = null;
        }
        if (!el) {
            result[selector] = null;
            return;
        }
        const computed = window.getComputedStyle(el);
        const styles = {};
        props.forEach(p => { styles[p] = computed.getPropertyValue(p); });
        result[selector] = styles;
    });
    return result;
}"""


def chunked(items: Sequence[Any], size: int) -> Iterator[List[Any]]:
    size = max(1, size)
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


async def open_page(
    browser: Browser,
    url: str,
    viewport: Optional[Dict[str, int]] = None,
    color_scheme: Optional[str] = None,
    navigation_timeout_ms: int = config.NAVIGATION_TIMEOUT_MS,
    settle_delay_ms: int = config.SETTLE_DELAY_MS,
) -> Tuple[BrowserContext, Page]:
    """Open ``url`` in a fresh context. The caller closes the context."""
    context_options: Dict[str, Any] = {
        "viewport": viewport or config.DEFAULT_VIEWPORT,
        "device_scale_factor": 1,
        "user_agent": USER_AGENT,
    }
    if color_scheme:
        context_options["color_scheme"] = color_scheme
    context = await browser.new_context(**context_options)
    page = await context.new_page()
    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=navigation_timeout_ms)
        await page.wait_for_selector("body", state="attached", timeout=config.BODY_TIMEOUT_MS)
        try:
            await page.wait_for_load_state("networkidle", timeout=config.NETWORK_IDLE_TIMEOUT_MS)
        except PlaywrightError:
            logger.debug("network_idle_timeout", url=url)
        await page.wait_for_timeout(settle_delay_ms)
    except PlaywrightError as exc:
        await context.close()
        raise DocumentUnavailableError(f"Could not load {url}: {exc}") from exc
    return context, page


async def capture_snapshot(
    page: Page,
    selectors: Optional[Sequence[str]] = None,
    chunk_size: int = config.SNAPSHOT_CHUNK_SIZE,
) -> StyleSnapshot:
    """Read every computed value the extractor needs, without touching the DOM.

    One call reads the root surfaces; the selector list follows in chunks of
    ``chunk_size``, each its own ``evaluate`` call.
    """
    selectors = list(selectors) if selectors is not None else cascade_selectors()
    try:
        base = await page.evaluate(ROOT_SCRIPT, config.ROOT_PROPS)
    except PlaywrightError as exc:
        raise DocumentUnavailableError(f"Inspection call rejected: {exc}") from exc
    if not base:
        raise DocumentUnavailableError("Page has no document body")

    matches: Dict[str, Optional[Dict[str, str]]] = {}
    for chunk in chunked(selectors, chunk_size):
        try:
            result = await page.evaluate(MATCH_SCRIPT, {"selectors": chunk, "props": config.SNAPSHOT_PROPS})
        except PlaywrightError as exc:
            raise DocumentUnavailableError(f"Inspection call rejected: {exc}") from exc
        for selector in chunk:
            matches[selector] = (result or {}).get(selector)

    snapshot = StyleSnapshot(
        root=base.get("root") or {},
        surface=base.get("surface") or {},
        matches=matches,
        prefers_dark=base.get("prefers_dark"),
        url=base.get("url") or "",
    )
    logger.info(
        "snapshot_captured",
        url=snapshot.url,
        selectors=len(selectors),
        matched=sum(1 for v in matches.values() if v is not None),
    )
    return snapshot


async def capture_screenshot(page: Page, path: Path, full_page: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    await page.screenshot(path=str(path), full_page=full_page)
    logger.info("screenshot_saved", path=str(path))
    return path
