"""Ordered first-match-wins candidate lists ("cascades").

A cascade is plain data: a list of ``CascadeStep`` objects, each naming a
selector, the computed properties to try on its first matching element,
and an ``accept`` function turning a raw value into a token (or ``None``
to move on). ``run_cascade`` walks the list and stops at the first hit.
"""

from dataclasses import dataclass
from typing import AbstractSet, Callable, List, Optional, Sequence, Tuple

from . import config
from .document import DocumentView
from .log import get_logger
from .values import is_transparent, is_zero_length, normalize_color, parse_length

logger = get_logger(__name__)

StyleReader = Callable[[str], Optional[str]]
Accept = Callable[[str, str, StyleReader], Optional[str]]


@dataclass(frozen=True)
class CascadeStep:
    selector: str
    properties: Tuple[str, ...]
    accept: Accept


@dataclass(frozen=True)
class CascadeHit:
    selector: str
    property: str
    value: str


def run_cascade(document: DocumentView, steps: Sequence[CascadeStep], name: str = "") -> Optional[CascadeHit]:
    for step in steps:
        def read(prop: str, _selector: str = step.selector) -> Optional[str]:
            return document.first_match_style(_selector, prop)

        for prop in step.properties:
            raw = read(prop)
            if raw is None:
                continue
            value = step.accept(prop, raw, read)
            if value is not None:
                logger.debug("cascade_hit", cascade=name, selector=step.selector, property=prop, value=value)
                return CascadeHit(step.selector, prop, value)
    logger.debug("cascade_miss", cascade=name)
    return None


def has_visible_border(read: StyleReader) -> bool:
    style = (read("border-top-style") or "none").strip().lower()
    if style in {"none", "hidden"}:
        return False
    width = parse_length(read("border-top-width"))
    return width is not None and width > 0


def color_signal(ignored: AbstractSet[str]) -> Accept:
    """Accept opaque-enough, parseable colors that are not browser defaults."""

    def accept(prop: str, raw: str, read: StyleReader) -> Optional[str]:
        if is_transparent(raw):
            return None
        value = normalize_color(raw)
        if value is None or value in ignored:
            return None
        if prop.startswith("border-") and not has_visible_border(read):
            return None
        return value

    return accept


def nonzero_length(prop: str, raw: str, read: StyleReader) -> Optional[str]:
    if is_zero_length(raw):
        return None
    return raw.strip()


def primary_cascade(ignored: AbstractSet[str] = config.UA_DEFAULT_COLORS) -> List[CascadeStep]:
    accept = color_signal(ignored)
    steps = [
        CascadeStep(selector, ("background-color", "border-top-color"), accept)
        for selector in config.PRIMARY_SELECTORS
    ]
    # Link text color is the last resort for pages without styled controls.
    steps.append(CascadeStep(config.PRIMARY_LINK_SELECTOR, ("color",), accept))
    return steps


def accent_cascade(ignored: AbstractSet[str] = config.UA_DEFAULT_COLORS) -> List[CascadeStep]:
    accept = color_signal(ignored)
    return [
        CascadeStep(selector, ("background-color", "color"), accept)
        for selector in config.ACCENT_SELECTORS
    ]


def radius_cascade() -> List[CascadeStep]:
    return [
        CascadeStep(selector, ("border-radius",), nonzero_length)
        for selector in config.RADIUS_SELECTORS
    ]


def cascade_selectors() -> List[str]:
    """Every selector a snapshot must capture, in first-use order."""
    ordered = (
        config.PRIMARY_SELECTORS
        + [config.PRIMARY_LINK_SELECTOR]
        + config.ACCENT_SELECTORS
        + config.RADIUS_SELECTORS
    )
    return list(dict.fromkeys(ordered))
