"""Constants and user-tunable settings."""

import json
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .values import normalize_color

DEFAULT_VIEWPORT = {"width": 1440, "height": 900}

NAVIGATION_TIMEOUT_MS = 60000
BODY_TIMEOUT_MS = 15000
NETWORK_IDLE_TIMEOUT_MS = 15000
SETTLE_DELAY_MS = 1500

# Selectors per inspection call. Large selector lists are split so no
# single evaluate call runs into the driver timeout.
SNAPSHOT_CHUNK_SIZE = 8

DEFAULT_CORNER_RADIUS = "0.5rem"

# Computed values of an unstyled document.
BROWSER_DEFAULT_BACKGROUND = "rgba(0, 0, 0, 0)"
BROWSER_DEFAULT_FOREGROUND = "rgb(0, 0, 0)"
LUMINANCE_THRESHOLD = 0.5

PRIMARY_SELECTORS = [
    "button:not([disabled])",
    ".btn:not([disabled])",
    ".button:not([disabled])",
    'a[class*="button"]',
    '[class*="primary"]',
    ".cta",
    'a[class*="cta"]',
]
PRIMARY_LINK_SELECTOR = "a"

ACCENT_SELECTORS = [
    '[class*="highlight"]',
    '[class*="accent"]',
    '[class*="secondary"]',
    '[class*="badge"]',
    '[class*="tag"]',
    'a:not([class*="button"]):not([class*="btn"])',
]

RADIUS_SELECTORS = [
    "button",
    ".btn",
    ".button",
    'input[type="text"]',
    'input[type="email"]',
    ".card",
    '[class*="rounded"]',
]

# Computed properties captured for every cascade selector.
SNAPSHOT_PROPS = [
    "background-color",
    "border-top-color",
    "border-top-style",
    "border-top-width",
    "border-radius",
    "color",
]

ROOT_PROPS = [
    "background-color",
    "color",
    "font-family",
    "font-size",
]

# Chromium's unstyled button face/border greys and unvisited link blue.
UA_DEFAULT_COLORS = frozenset({
    "#efefef",
    "#f0f0f0",
    "#767676",
    "#858585",
    "#0000ee",
})

DEFAULT_PANEL_WIDTH = "400px"
PANEL_Z_INDEX = 2147483000


def _split_viewport(raw: str) -> Dict[str, int]:
    width_str, sep, height_str = raw.strip().lower().partition("x")
    if not sep:
        raise ValueError(f"viewport must look like 1440x900, got {raw!r}")
    try:
        return {"width": int(width_str), "height": int(height_str)}
    except ValueError:
        raise ValueError(f"viewport must look like 1440x900, got {raw!r}") from None


class Viewport(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(default=DEFAULT_VIEWPORT["width"], gt=0)
    height: int = Field(default=DEFAULT_VIEWPORT["height"], gt=0)


def parse_viewport(raw: Optional[str]) -> Dict[str, int]:
    if not raw:
        return dict(DEFAULT_VIEWPORT)
    try:
        return Viewport(**_split_viewport(raw)).model_dump()
    except ValueError as exc:
        raise ConfigError(str(exc)) from None


class ExtractionSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    default_corner_radius: str = DEFAULT_CORNER_RADIUS
    luminance_threshold: float = Field(default=LUMINANCE_THRESHOLD, ge=0.0, le=1.0)
    ignored_colors: FrozenSet[str] = UA_DEFAULT_COLORS

    @field_validator("ignored_colors", mode="before")
    @classmethod
    def _reject_bare_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            raise ValueError("ignored_colors must be a list of colors")
        return value

    @field_validator("ignored_colors")
    @classmethod
    def _normalize_colors(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        return frozenset(normalize_color(c) or c.strip().lower() for c in value)


class PreviewSettings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    panel_width: str = DEFAULT_PANEL_WIDTH
    viewport: Viewport = Field(default_factory=Viewport)
    navigation_timeout_ms: int = Field(default=NAVIGATION_TIMEOUT_MS, ge=0)
    settle_delay_ms: int = Field(default=SETTLE_DELAY_MS, ge=0)

    @field_validator("viewport", mode="before")
    @classmethod
    def _viewport_from_string(cls, value: Any) -> Any:
        # "1440x900" is accepted as well as {"width": 1440, "height": 900}.
        if isinstance(value, str):
            return _split_viewport(value)
        return value


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)


def load_settings(path: Optional[str]) -> Settings:
    if not path:
        return Settings()
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Config file {config_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain an object")
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {config_path}: {exc}") from exc
