"""Theme variables understood by the embedded widget.

The names below are the widget's public styling contract. Renaming or
removing one breaks every host already themed with it, so changes here go
with a ``WIDGET_VOCABULARY_VERSION`` bump.
"""

from typing import Dict, Iterator, Mapping, Optional

from .errors import UnknownThemeVariableError

WIDGET_VOCABULARY_VERSION = "1"

BACKGROUND = "--widget-background"
FOREGROUND = "--widget-foreground"
PRIMARY = "--widget-primary"
PRIMARY_FOREGROUND = "--widget-primary-foreground"
ACCENT = "--widget-accent"
MUTED = "--widget-muted"
MUTED_FOREGROUND = "--widget-muted-foreground"
BORDER = "--widget-border"
RADIUS = "--widget-radius"
FONT_FAMILY = "--widget-font-family"
FONT_SIZE = "--widget-font-size"
COLOR_SCHEME = "--widget-color-scheme"

USER_BUBBLE_BACKGROUND = "--widget-user-bubble-background"
USER_BUBBLE_FOREGROUND = "--widget-user-bubble-foreground"
ASSISTANT_BUBBLE_BACKGROUND = "--widget-assistant-bubble-background"
ASSISTANT_BUBBLE_FOREGROUND = "--widget-assistant-bubble-foreground"
COMPOSER_BACKGROUND = "--widget-composer-background"
COMPOSER_FOREGROUND = "--widget-composer-foreground"
COMPOSER_BORDER = "--widget-composer-border"
TOOL_BACKGROUND = "--widget-tool-background"
TOOL_BORDER = "--widget-tool-border"
TOOL_ACCENT = "--widget-tool-accent"

WIDGET_VARIABLES = (
    BACKGROUND,
    FOREGROUND,
    PRIMARY,
    PRIMARY_FOREGROUND,
    ACCENT,
    MUTED,
    MUTED_FOREGROUND,
    BORDER,
    RADIUS,
    FONT_FAMILY,
    FONT_SIZE,
    COLOR_SCHEME,
    USER_BUBBLE_BACKGROUND,
    USER_BUBBLE_FOREGROUND,
    ASSISTANT_BUBBLE_BACKGROUND,
    ASSISTANT_BUBBLE_FOREGROUND,
    COMPOSER_BACKGROUND,
    COMPOSER_FOREGROUND,
    COMPOSER_BORDER,
    TOOL_BACKGROUND,
    TOOL_BORDER,
    TOOL_ACCENT,
)

_ORDER = {name: index for index, name in enumerate(WIDGET_VARIABLES)}


class ThemeVariableMap(Mapping[str, str]):
    """Immutable variable-name to value mapping in vocabulary order."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        values = values or {}
        unknown = sorted(name for name in values if name not in _ORDER)
        if unknown:
            raise UnknownThemeVariableError(f"Not in widget vocabulary v{WIDGET_VOCABULARY_VERSION}: {', '.join(unknown)}")
        self._values: Dict[str, str] = {
            name: str(values[name]) for name in sorted(values, key=_ORDER.__getitem__)
        }

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ThemeVariableMap({self._values!r})"

    def unset(self):
        return [name for name in WIDGET_VARIABLES if name not in self._values]

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def to_css(self, selector: Optional[str] = None) -> str:
        lines = [f"{name}: {value};" for name, value in self._values.items()]
        if selector is None:
            return "\n".join(lines)
        body = "\n".join("  " + line for line in lines)
        return f"{selector} {{\n{body}\n}}"
