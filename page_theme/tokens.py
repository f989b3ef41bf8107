from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import TokenRecordError


class ColorScheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class DesignTokenSet:
    """Design tokens inferred from one rendered page.

    ``background_color``, ``foreground_color`` and ``corner_radius`` are
    always set. ``None`` in any other field means no confident signal was
    found; consumers must not read it as a default.
    """

    background_color: str
    foreground_color: str
    corner_radius: str
    color_scheme: ColorScheme
    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    font_family: Tuple[str, ...] = ()
    font_size: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "backgroundColor": self.background_color,
            "foregroundColor": self.foreground_color,
        }
        if self.primary_color is not None:
            record["primaryColor"] = self.primary_color
        if self.accent_color is not None:
            record["accentColor"] = self.accent_color
        if self.font_family:
            record["fontFamily"] = list(self.font_family)
        if self.font_size is not None:
            record["fontSize"] = self.font_size
        record["cornerRadius"] = self.corner_radius
        record["colorScheme"] = self.color_scheme.value
        return record

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DesignTokenSet":
        if not isinstance(data, dict):
            raise TokenRecordError("Token record must be an object")
        missing = [
            key for key in ("backgroundColor", "foregroundColor", "cornerRadius", "colorScheme")
            if not data.get(key)
        ]
        if missing:
            raise TokenRecordError(f"Token record is missing: {', '.join(missing)}")
        try:
            scheme = ColorScheme(data["colorScheme"])
        except ValueError:
            raise TokenRecordError(f"Unknown colorScheme: {data['colorScheme']!r}") from None
        family = data.get("fontFamily") or ()
        if isinstance(family, str):
            family = (family,)
        return cls(
            background_color=data["backgroundColor"],
            foreground_color=data["foregroundColor"],
            corner_radius=data["cornerRadius"],
            color_scheme=scheme,
            primary_color=data.get("primaryColor"),
            accent_color=data.get("accentColor"),
            font_family=tuple(family),
            font_size=data.get("fontSize"),
        )
