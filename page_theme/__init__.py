"""Infer design tokens from rendered pages and theme an embedded widget to match."""

from .document import DocumentView, StyleSnapshot
from .errors import (
    DocumentUnavailableError,
    InjectionError,
    NoLayoutContainerError,
    PageThemeError,
    WidgetBundleError,
    WidgetNotFoundError,
)
from .extractor import TokenExtractor, extract_tokens
from .mapper import map_tokens_to_theme_variables
from .panel import InjectedPanelSpec, PanelState
from .tokens import ColorScheme, DesignTokenSet
from .vocabulary import WIDGET_VARIABLES, WIDGET_VOCABULARY_VERSION, ThemeVariableMap

__version__ = "0.1.0"

__all__ = [
    "ColorScheme",
    "DesignTokenSet",
    "DocumentUnavailableError",
    "DocumentView",
    "InjectedPanelSpec",
    "InjectionError",
    "NoLayoutContainerError",
    "PageThemeError",
    "PanelState",
    "StyleSnapshot",
    "ThemeVariableMap",
    "TokenExtractor",
    "WIDGET_VARIABLES",
    "WIDGET_VOCABULARY_VERSION",
    "WidgetBundleError",
    "WidgetNotFoundError",
    "extract_tokens",
    "map_tokens_to_theme_variables",
]
