"""DOM-writing side: theme the widget host and insert the preview panel."""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError, Page

from .errors import InjectionError, NoLayoutContainerError, WidgetBundleError, WidgetNotFoundError
from .log import get_logger
from .panel import INITIAL_STATE, InjectedPanelSpec, PanelState, next_state
from .vocabulary import WIDGET_VARIABLES, WIDGET_VOCABULARY_VERSION, ThemeVariableMap

logger = get_logger(__name__)

# (page, mount_selector) -> selector of the mounted widget host
WidgetFactory = Callable[[Page, str], Awaitable[str]]

APPLY_THEME_SCRIPT = """(el, {values, remove, version}) => {
    remove.forEach(name => el.style.removeProperty(name));
    Object.entries(values).forEach(([name, value]) => el.style.setProperty(name, value));
    el.setAttribute('data-widget-theme-version', version);
    return Object.keys(values).length;
}"""

LAYOUT_CANDIDATES_SCRIPT = """(excludeIds) => {
    const selectorPath = (el) => {
        if (el.id) {
            return '#' + CSS.escape(el.id);
        }
        const parts = [];
        let node = el;
        while (node && node.nodeType === 1) {
            if (node.id) {
                parts.unshift('#' + CSS.escape(node.id));
                break;
            }
            let selector = node.tagName.toLowerCase();
            const siblings = node.parentElement
                ? Array.from(node.parentElement.children).filter(n => n.tagName === node.tagName)
                : [];
            if (siblings.length > 1) {
                selector += `:nth-of-type(${siblings.indexOf(node) + 1})`;
            }
            parts.unshift(selector);
            node = node.parentElement;
        }
        return parts.join(' > ');
    };
    const depthOf = (el) => {
        let depth = 0;
        let node = el.parentElement;
        while (node) {
            depth += 1;
            node = node.parentElement;
        }
        return depth;
    };
    if (!document.body) {
        return [];
    }
    const elements = [document.body, ...document.body.querySelectorAll('*')];
    const result = [];
    for (const el of elements) {
        if (excludeIds.includes(el.id)) {
            continue;
        }
        const style = window.getComputedStyle(el);
        if (style.display !== 'flex' && style.display !== 'inline-flex') {
            continue;
        }
        if (style.flexDirection !== 'row' && style.flexDirection !== 'row-reverse') {
            continue;
        }
        const rect = el.getBoundingClientRect();
        if (rect.width <= 0) {
            continue;
        }
        result.push({
            selector: selectorPath(el),
            width: rect.width,
            height: rect.height,
            depth: depthOf(el),
            position: style.position,
        });
    }
    return result;
}"""

BUILD_PANEL_SCRIPT = """({containerSelector, ids, labels, styles, initial}) => {
    const host = containerSelector ? document.querySelector(containerSelector) : document.body;
    if (!host) {
        return false;
    }
    const applyStyle = (el, style) => {
        Object.entries(style).forEach(([name, value]) => el.style.setProperty(name, value));
    };
    [ids.panel, ids.toggle].forEach(id => {
        const stale = document.getElementById(id);
        if (stale) {
            stale.remove();
        }
    });

    const panel = document.createElement('aside');
    panel.id = ids.panel;
    const header = document.createElement('div');
    header.style.setProperty('display', 'flex');
    header.style.setProperty('justify-content', 'flex-end');
    const close = document.createElement('button');
    close.id = ids.close;
    close.type = 'button';
    close.textContent = labels.close;
    header.appendChild(close);
    const mount = document.createElement('div');
    mount.setAttribute('data-widget-mount', '');
    mount.style.setProperty('flex', '1 1 auto');
    mount.style.setProperty('min-height', '0');
    panel.appendChild(header);
    panel.appendChild(mount);

    const toggle = document.createElement('button');
    toggle.id = ids.toggle;
    toggle.type = 'button';
    toggle.textContent = labels.toggle;

    const setState = (state) => {
        panel.setAttribute('data-state', state);
        applyStyle(panel, styles[state].panel);
        applyStyle(toggle, styles[state].toggle);
    };
    toggle.addEventListener('click', () => setState('expanded'));
    close.addEventListener('click', () => setState('collapsed'));

    host.appendChild(panel);
    document.body.appendChild(toggle);
    setState(initial);
    return true;
}"""

REMOVE_PANEL_SCRIPT = """(ids) => {
    ids.forEach(id => {
        const el = document.getElementById(id);
        if (el) {
            el.remove();
        }
    });
}"""

MOUNT_WIDGET_SCRIPT = """({mountSelector, tagName, attributes}) => {
    const mount = document.querySelector(mountSelector);
    if (!mount) {
        return false;
    }
    let widget = mount.querySelector(tagName);
    if (!widget) {
        widget = document.createElement(tagName);
        mount.appendChild(widget);
    }
    Object.entries(attributes).forEach(([name, value]) => widget.setAttribute(name, value));
    widget.style.setProperty('display', 'block');
    widget.style.setProperty('height', '100%');
    return true;
}"""

ELEMENT_DEFINED_SCRIPT = """(tagName) => !!(window.customElements && window.customElements.get(tagName))"""


def style_writes(variables: ThemeVariableMap) -> Tuple[Dict[str, str], List[str]]:
    """Properties to set and to remove so only ``variables`` stay applied."""
    return variables.to_dict(), variables.unset()


async def apply_theme_in_place(widget_handle: Any, variables: ThemeVariableMap) -> int:
    """Write ``variables`` onto the widget host's inline style.

    ``widget_handle`` is a Playwright ``ElementHandle`` or ``Locator``.
    Vocabulary names missing from ``variables`` are removed, so applying a
    new map never leaves values from an earlier theme behind.
    """
    values, remove = style_writes(variables)
    try:
        count = await widget_handle.evaluate(
            APPLY_THEME_SCRIPT,
            {"values": values, "remove": remove, "version": WIDGET_VOCABULARY_VERSION},
        )
    except PlaywrightError as exc:
        raise InjectionError(f"Could not write theme variables: {exc}") from exc
    logger.info("theme_applied", set=len(values), removed=len(remove))
    return count


async def apply_theme_to_selector(page: Page, selector: str, variables: ThemeVariableMap) -> int:
    handle = await page.query_selector(selector)
    if handle is None:
        raise WidgetNotFoundError(f"No widget element matches {selector}")
    return await apply_theme_in_place(handle, variables)


def choose_layout_container(candidates: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Pick the widest in-flow row flex container.

    Width ties go to the taller candidate, then to the outermost one.
    Fixed and absolutely positioned containers (toolbars, popovers) never
    host the panel.
    """
    in_flow = [
        c for c in candidates
        if c.get("selector") and (c.get("position") or "static") not in {"fixed", "absolute"}
    ]
    if not in_flow:
        return None
    return min(
        in_flow,
        key=lambda c: (-float(c.get("width") or 0), -float(c.get("height") or 0), int(c.get("depth") or 0)),
    )


async def find_layout_container(page: Page, spec: Optional[InjectedPanelSpec] = None) -> str:
    spec = spec or InjectedPanelSpec()
    candidates = await page.evaluate(LAYOUT_CANDIDATES_SCRIPT, [spec.panel_id, spec.toggle_id])
    chosen = choose_layout_container(candidates or [])
    if chosen is None:
        logger.warning("layout_container_missing", url=page.url, candidates=len(candidates or []))
        raise NoLayoutContainerError("Page has no row flex container to host the panel")
    logger.debug("layout_container_found", selector=chosen["selector"], width=chosen.get("width"))
    return chosen["selector"]


class InjectedPanel:
    """Handle to a preview panel inserted into a live page."""

    def __init__(self, page: Page, spec: InjectedPanelSpec, container_selector: Optional[str], overlay: bool):
        self.page = page
        self.spec = spec
        self.container_selector = container_selector
        self.overlay = overlay
        self.widget_selector: Optional[str] = None

    @property
    def mount_selector(self) -> str:
        return f"#{self.spec.panel_id} [data-widget-mount]"

    async def state(self) -> PanelState:
        raw = await self.page.get_attribute(f"#{self.spec.panel_id}", "data-state")
        if raw is None:
            raise InjectionError("Preview panel is no longer on the page")
        return PanelState(raw)

    async def toggle(self) -> PanelState:
        current = await self.state()
        control = self.spec.toggle_id if current is PanelState.COLLAPSED else self.spec.close_id
        await self.page.click(f"#{control}")
        return next_state(current)

    async def remove(self) -> None:
        await self.page.evaluate(REMOVE_PANEL_SCRIPT, [self.spec.panel_id, self.spec.toggle_id])


async def _insert_panel(
    page: Page,
    widget_factory: Optional[WidgetFactory],
    spec: InjectedPanelSpec,
    container_selector: Optional[str],
    overlay: bool,
) -> InjectedPanel:
    inserted = await page.evaluate(
        BUILD_PANEL_SCRIPT,
        {
            "containerSelector": container_selector,
            "ids": {"panel": spec.panel_id, "toggle": spec.toggle_id, "close": spec.close_id},
            "labels": {"toggle": spec.toggle_label, "close": spec.close_label},
            "styles": spec.state_styles(overlay=overlay),
            "initial": INITIAL_STATE.value,
        },
    )
    if not inserted:
        raise InjectionError(f"Panel host disappeared: {container_selector}")
    panel = InjectedPanel(page, spec, container_selector, overlay)
    if widget_factory is not None:
        panel.widget_selector = await widget_factory(page, panel.mount_selector)
    logger.info("panel_injected", container=container_selector or "body", overlay=overlay)
    return panel


async def build_injected_panel(
    page: Page,
    widget_factory: Optional[WidgetFactory] = None,
    spec: Optional[InjectedPanelSpec] = None,
    container_selector: Optional[str] = None,
) -> InjectedPanel:
    """Append a collapsible flex-sibling panel to the page's main row layout.

    Raises ``NoLayoutContainerError`` when the page has no suitable container;
    callers fall back to ``build_overlay_panel``.
    """
    spec = spec or InjectedPanelSpec()
    if container_selector is None:
        container_selector = await find_layout_container(page, spec)
    return await _insert_panel(page, widget_factory, spec, container_selector, overlay=False)


async def build_overlay_panel(
    page: Page,
    widget_factory: Optional[WidgetFactory] = None,
    spec: Optional[InjectedPanelSpec] = None,
) -> InjectedPanel:
    spec = spec or InjectedPanelSpec()
    return await _insert_panel(page, widget_factory, spec, None, overlay=True)


def script_widget_factory(
    bundle_url: str,
    tag_name: str,
    attributes: Optional[Dict[str, str]] = None,
) -> WidgetFactory:
    """Factory loading the widget bundle (once per page) and mounting ``<tag_name>``."""
    attributes = dict(attributes or {})

    async def factory(page: Page, mount_selector: str) -> str:
        defined = await page.evaluate(ELEMENT_DEFINED_SCRIPT, tag_name)
        if not defined:
            try:
                await page.add_script_tag(url=bundle_url)
            except PlaywrightError as exc:
                raise WidgetBundleError(f"Could not load widget bundle {bundle_url}: {exc}") from exc
            logger.info("widget_bundle_loaded", url=bundle_url)
        mounted = await page.evaluate(
            MOUNT_WIDGET_SCRIPT,
            {"mountSelector": mount_selector, "tagName": tag_name, "attributes": attributes},
        )
        if not mounted:
            raise InjectionError(f"Widget mount point missing: {mount_selector}")
        return f"{mount_selector} > {tag_name}"

    return factory
