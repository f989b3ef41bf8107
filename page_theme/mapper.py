"""Map a DesignTokenSet onto the widget's theme variables."""

from typing import Dict, Optional

from . import vocabulary as v
from .log import get_logger
from .tokens import DesignTokenSet
from .values import RGB, color_to_hex, contrast_ratio, join_font_stack, mix_colors, parse_color

logger = get_logger(__name__)

BLACK = "#000000"
WHITE = "#ffffff"

MUTED_WEIGHT = 0.06
MUTED_FOREGROUND_WEIGHT = 0.35
BORDER_WEIGHT = 0.15

# Sub-role variables copy a base variable when it is set.
SUB_ROLES = (
    (v.USER_BUBBLE_BACKGROUND, v.PRIMARY),
    (v.USER_BUBBLE_FOREGROUND, v.PRIMARY_FOREGROUND),
    (v.ASSISTANT_BUBBLE_BACKGROUND, v.MUTED),
    (v.ASSISTANT_BUBBLE_FOREGROUND, v.FOREGROUND),
    (v.COMPOSER_BACKGROUND, v.BACKGROUND),
    (v.COMPOSER_FOREGROUND, v.FOREGROUND),
    (v.COMPOSER_BORDER, v.BORDER),
    (v.TOOL_BACKGROUND, v.MUTED),
    (v.TOOL_BORDER, v.BORDER),
    (v.TOOL_ACCENT, v.ACCENT),
)


def _opaque_rgb(value: Optional[str]) -> Optional[RGB]:
    rgba = parse_color(value)
    if rgba is None or rgba[3] <= 0:
        return None
    return rgba[0], rgba[1], rgba[2]


def on_color(background: str) -> Optional[str]:
    """Black or white, whichever reads better on ``background`` (ties go to white)."""
    rgb = _opaque_rgb(background)
    if rgb is None:
        return None
    on_black = contrast_ratio((0, 0, 0), rgb)
    on_white = contrast_ratio((255, 255, 255), rgb)
    return BLACK if on_black > on_white else WHITE


def _mixed(base: RGB, other: RGB, weight: float) -> str:
    r, g, b = mix_colors(base, other, weight)
    return color_to_hex((r, g, b, 1.0))


def map_tokens_to_theme_variables(tokens: DesignTokenSet) -> v.ThemeVariableMap:
    values: Dict[str, str] = {
        v.BACKGROUND: tokens.background_color,
        v.FOREGROUND: tokens.foreground_color,
        v.RADIUS: tokens.corner_radius,
        v.COLOR_SCHEME: tokens.color_scheme.value,
    }
    if tokens.font_family:
        values[v.FONT_FAMILY] = join_font_stack(list(tokens.font_family))
    if tokens.font_size:
        values[v.FONT_SIZE] = tokens.font_size

    if tokens.primary_color:
        values[v.PRIMARY] = tokens.primary_color
        text_on_primary = on_color(tokens.primary_color)
        if text_on_primary:
            values[v.PRIMARY_FOREGROUND] = text_on_primary
    if tokens.accent_color:
        values[v.ACCENT] = tokens.accent_color

    bg = _opaque_rgb(tokens.background_color)
    fg = _opaque_rgb(tokens.foreground_color)
    if bg is not None and fg is not None:
        values[v.MUTED] = _mixed(bg, fg, MUTED_WEIGHT)
        values[v.MUTED_FOREGROUND] = _mixed(fg, bg, MUTED_FOREGROUND_WEIGHT)
        values[v.BORDER] = _mixed(bg, fg, BORDER_WEIGHT)

    for role, source in SUB_ROLES:
        if source in values:
            values[role] = values[source]

    variables = v.ThemeVariableMap(values)
    logger.debug("theme_mapped", set=len(variables), unset=len(variables.unset()))
    return variables
