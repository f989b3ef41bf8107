"""Collapsible preview panel: states and per-state inline styles.

The panel has two states. ``COLLAPSED`` (initial) shows the floating
toggle and gives the panel zero width; ``EXPANDED`` gives it
``expanded_width`` and hides the toggle. Only user toggles move between
them; the panel goes away with the page.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .config import DEFAULT_PANEL_WIDTH, PANEL_Z_INDEX


class PanelState(str, Enum):
    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


INITIAL_STATE = PanelState.COLLAPSED


def next_state(state: PanelState) -> PanelState:
    if state is PanelState.COLLAPSED:
        return PanelState.EXPANDED
    return PanelState.COLLAPSED


@dataclass(frozen=True)
class InjectedPanelSpec:
    panel_id: str = "page-theme-preview-panel"
    toggle_id: str = "page-theme-preview-toggle"
    close_id: str = "page-theme-preview-close"
    expanded_width: str = DEFAULT_PANEL_WIDTH
    toggle_label: str = "Open assistant"
    close_label: str = "Close"
    z_index: int = PANEL_Z_INDEX
    transition: str = "width 200ms ease"

    def panel_style(self, state: PanelState, overlay: bool = False) -> Dict[str, str]:
        expanded = state is PanelState.EXPANDED
        width = self.expanded_width if expanded else "0px"
        style = {
            "width": width,
            "flex": f"0 0 {width}",
            "overflow": "hidden",
            "transition": self.transition,
            "display": "flex",
            "flex-direction": "column",
            "box-sizing": "border-box",
        }
        if overlay:
            style.update({
                "position": "fixed",
                "top": "0",
                "right": "0",
                "height": "100vh",
                "z-index": str(self.z_index),
            })
        else:
            style.update({
                "position": "sticky",
                "top": "0",
                # A collapsed in-flow panel must not grow its row container.
                "height": "100vh" if expanded else "0px",
                "align-self": "flex-start",
            })
        return style

    def toggle_style(self, state: PanelState) -> Dict[str, str]:
        return {
            "position": "fixed",
            "right": "16px",
            "bottom": "16px",
            "z-index": str(self.z_index + 1),
            "display": "none" if state is PanelState.EXPANDED else "block",
        }

    def state_styles(self, overlay: bool = False) -> Dict[str, Any]:
        """Styles for every state, keyed by state value, for the page script."""
        return {
            state.value: {
                "panel": self.panel_style(state, overlay=overlay),
                "toggle": self.toggle_style(state),
            }
            for state in PanelState
        }
