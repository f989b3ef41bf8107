"""Read-only view of a rendered document.

The extractor never talks to a browser directly. It asks a ``DocumentView``
for computed style values; ``StyleSnapshot`` answers from data captured by
``page_theme.browser.capture_snapshot`` (or loaded from a saved JSON file),
so extraction can run offline and against several captures of one page.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from .errors import DocumentUnavailableError, SnapshotMissError

StyleMap = Dict[str, str]


class DocumentView(Protocol):
    def root_style(self, prop: str) -> Optional[str]:
        ...

    def surface_style(self, prop: str) -> Optional[str]:
        ...

    def first_match_style(self, selector: str, prop: str) -> Optional[str]:
        ...

    def prefers_dark_scheme(self) -> Optional[bool]:
        ...


@dataclass(frozen=True)
class StyleSnapshot:
    """Computed styles captured from one page state.

    ``root`` holds the ``<body>`` styles and ``surface`` the ``<html>``
    styles. ``matches`` maps every captured selector to the styles of its
    first matching element, or ``None`` when nothing matched.
    """

    root: StyleMap
    surface: StyleMap = field(default_factory=dict)
    matches: Dict[str, Optional[StyleMap]] = field(default_factory=dict)
    prefers_dark: Optional[bool] = None
    url: str = ""

    def root_style(self, prop: str) -> Optional[str]:
        return self.root.get(prop) or None

    def surface_style(self, prop: str) -> Optional[str]:
        return self.surface.get(prop) or None

    def first_match_style(self, selector: str, prop: str) -> Optional[str]:
        if selector not in self.matches:
            raise SnapshotMissError(f"Selector was not captured: {selector}")
        styles = self.matches[selector]
        if styles is None:
            return None
        return styles.get(prop) or None

    def prefers_dark_scheme(self) -> Optional[bool]:
        return self.prefers_dark

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "root": dict(self.root),
            "surface": dict(self.surface),
            "matches": {k: (dict(v) if v is not None else None) for k, v in self.matches.items()},
            "prefers_dark": self.prefers_dark,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleSnapshot":
        root = data.get("root") if isinstance(data, dict) else None
        if not isinstance(root, dict) or not root:
            raise DocumentUnavailableError("Snapshot has no root document styles")
        matches = data.get("matches") or {}
        prefers_dark = data.get("prefers_dark")
        return cls(
            root=dict(root),
            surface=dict(data.get("surface") or {}),
            matches={k: (dict(v) if v is not None else None) for k, v in matches.items()},
            prefers_dark=prefers_dark if isinstance(prefers_dark, bool) else None,
            url=data.get("url") or "",
        )
