"""Infer a DesignTokenSet from the computed styles of a rendered page."""

from typing import Optional, Tuple

from . import config
from .cascade import accent_cascade, primary_cascade, radius_cascade, run_cascade
from .config import ExtractionSettings
from .document import DocumentView
from .errors import DocumentUnavailableError
from .log import get_logger
from .tokens import ColorScheme, DesignTokenSet
from .values import is_transparent, normalize_color, parse_color, perceived_luminance, split_font_stack

logger = get_logger(__name__)


def scheme_for_luminance(luminance: float, threshold: float = config.LUMINANCE_THRESHOLD) -> ColorScheme:
    # A luminance exactly at the threshold is dark.
    return ColorScheme.LIGHT if luminance > threshold else ColorScheme.DARK


class TokenExtractor:
    """Runs the token heuristics against one ``DocumentView``.

    Every method only reads from the view, so an extractor can be called
    any number of times; results change only when the view does.
    """

    def __init__(self, document: Optional[DocumentView], settings: Optional[ExtractionSettings] = None):
        if document is None:
            raise DocumentUnavailableError("No document available to inspect")
        self.document = document
        self.settings = settings or ExtractionSettings()

    def extract_background_and_foreground(self) -> Tuple[str, str]:
        background = self.document.root_style("background-color")
        if is_transparent(background):
            surface = self.document.surface_style("background-color")
            if not is_transparent(surface):
                background = surface
        if not background:
            background = config.BROWSER_DEFAULT_BACKGROUND

        foreground = self.document.root_style("color") or config.BROWSER_DEFAULT_FOREGROUND
        return (
            normalize_color(background) or background.strip(),
            normalize_color(foreground) or foreground.strip(),
        )

    def extract_primary_color(self) -> Optional[str]:
        hit = run_cascade(self.document, primary_cascade(self.settings.ignored_colors), name="primary")
        return hit.value if hit else None

    def extract_accent_color(self) -> Optional[str]:
        hit = run_cascade(self.document, accent_cascade(self.settings.ignored_colors), name="accent")
        return hit.value if hit else None

    def extract_corner_radius(self) -> str:
        hit = run_cascade(self.document, radius_cascade(), name="radius")
        if hit is None:
            return self.settings.default_corner_radius
        return hit.value

    def extract_typography(self) -> Tuple[Tuple[str, ...], Optional[str]]:
        family = tuple(split_font_stack(self.document.root_style("font-family")))
        size = self.document.root_style("font-size")
        return family, (size.strip() if size else None)

    def classify_color_scheme(self) -> ColorScheme:
        background, _ = self.extract_background_and_foreground()
        rgba = parse_color(background)
        if rgba is not None and rgba[3] > 0:
            luminance = perceived_luminance(rgba[:3])
            return scheme_for_luminance(luminance, self.settings.luminance_threshold)

        prefers_dark = self.document.prefers_dark_scheme()
        if prefers_dark is not None:
            logger.debug("color_scheme_from_preference", background=background, prefers_dark=prefers_dark)
            return ColorScheme.DARK if prefers_dark else ColorScheme.LIGHT

        logger.debug("color_scheme_default", background=background)
        return ColorScheme.LIGHT

    def extract(self) -> DesignTokenSet:
        background, foreground = self.extract_background_and_foreground()
        family, size = self.extract_typography()
        tokens = DesignTokenSet(
            background_color=background,
            foreground_color=foreground,
            corner_radius=self.extract_corner_radius(),
            color_scheme=self.classify_color_scheme(),
            primary_color=self.extract_primary_color(),
            accent_color=self.extract_accent_color(),
            font_family=family,
            font_size=size,
        )
        logger.info("tokens_extracted", **tokens.to_dict())
        return tokens


def extract_tokens(document: DocumentView, settings: Optional[ExtractionSettings] = None) -> DesignTokenSet:
    return TokenExtractor(document, settings).extract()
