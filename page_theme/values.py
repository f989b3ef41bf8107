"""Parsing helpers for computed CSS values (colors, lengths, font stacks)."""

import re
from typing import List, Optional, Tuple

RGBA = Tuple[int, int, int, float]
RGB = Tuple[int, int, int]

_FUNC_RE = re.compile(r"^rgba?\(([^)]*)\)$")
_HEX_RE = re.compile(r"^#([0-9a-f]{3,8})$")
_LENGTH_SPLIT_RE = re.compile(r"[\s/]+")


def _parse_channel(raw: str) -> int:
    raw = raw.strip()
    if raw.endswith("%"):
        value = float(raw[:-1]) * 2.55
    else:
        value = float(raw)
    return max(0, min(255, int(round(value))))


def _parse_alpha(raw: str) -> float:
    raw = raw.strip()
    if raw.endswith("%"):
        value = float(raw[:-1]) / 100.0
    else:
        value = float(raw)
    return max(0.0, min(1.0, value))


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    if not value:
        return None
    value = value.strip().lower()
    if value in {"transparent", "none", "currentcolor"}:
        return None

    func_match = _FUNC_RE.match(value)
    if func_match:
        body = func_match.group(1).strip()
        alpha_part = None
        if "/" in body:
            body, alpha_part = body.split("/", 1)
        if "," in body:
            parts = [p.strip() for p in body.split(",") if p.strip()]
        else:
            parts = body.split()
        if alpha_part is None and len(parts) == 4:
            alpha_part = parts.pop()
        if len(parts) != 3:
            return None
        try:
            r, g, b = (_parse_channel(p) for p in parts)
            a = _parse_alpha(alpha_part) if alpha_part is not None else 1.0
        except ValueError:
            return None
        return r, g, b, a

    hex_match = _HEX_RE.match(value)
    if hex_match:
        h = hex_match.group(1)
        if len(h) in {3, 4}:
            r = int(h[0] * 2, 16)
            g = int(h[1] * 2, 16)
            b = int(h[2] * 2, 16)
            a = int(h[3] * 2, 16) / 255.0 if len(h) == 4 else 1.0
            return r, g, b, a
        if len(h) in {6, 8}:
            r = int(h[0:2], 16)
            g = int(h[2:4], 16)
            b = int(h[4:6], 16)
            a = int(h[6:8], 16) / 255.0 if len(h) == 8 else 1.0
            return r, g, b, a
    return None


def is_transparent(value: Optional[str]) -> bool:
    """True for unset values, the ``transparent`` keyword and zero-alpha colors.

    Unparseable but non-empty values (``oklch(...)``, gradients) are not
    transparent; callers decide separately whether they can use them.
    """
    if not value or not value.strip():
        return True
    clean = value.strip().lower()
    if clean in {"transparent", "none"}:
        return True
    rgba = parse_color(clean)
    return rgba is not None and rgba[3] <= 0.0


def color_to_hex(rgba: RGBA) -> str:
    r, g, b, a = rgba
    if a >= 0.999:
        return f"#{r:02x}{g:02x}{b:02x}"
    return f"#{r:02x}{g:02x}{b:02x}{int(round(a * 255)):02x}"


def normalize_color(value: Optional[str]) -> Optional[str]:
    """Hex form of a parseable color, else ``None``."""
    rgba = parse_color(value)
    if rgba is None:
        return None
    return color_to_hex(rgba)


def perceived_luminance(rgb: RGB) -> float:
    r, g, b = rgb[:3]
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255.0


def relative_luminance(rgb: RGB) -> float:
    def channel(c: int) -> float:
        c = c / 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return 0.2126 * channel(rgb[0]) + 0.7152 * channel(rgb[1]) + 0.0722 * channel(rgb[2])


def contrast_ratio(fg: RGB, bg: RGB) -> float:
    lum_fg = relative_luminance(fg)
    lum_bg = relative_luminance(bg)
    lighter = max(lum_fg, lum_bg)
    darker = min(lum_fg, lum_bg)
    return (lighter + 0.05) / (darker + 0.05)


def mix_colors(base: RGB, other: RGB, weight: float) -> RGB:
    """Move ``base`` toward ``other`` by ``weight`` (0 keeps base, 1 yields other)."""
    r, g, b = (int(round(c + (o - c) * weight)) for c, o in zip(base[:3], other[:3]))
    return r, g, b


def parse_length(value: Optional[str], root_font_size: float = 16.0) -> Optional[float]:
    if not value:
        return None
    value = value.strip().lower()
    if value in {"auto", "normal", "none"}:
        return None
    if value.endswith("%"):
        return None
    for unit, scale in (("px", 1.0), ("rem", root_font_size), ("em", root_font_size)):
        if value.endswith(unit):
            try:
                return float(value[: -len(unit)]) * scale
            except ValueError:
                return None
    try:
        return float(value)
    except ValueError:
        return None


def is_zero_length(value: Optional[str]) -> bool:
    """True when every component of a (shorthand) length is zero or unset."""
    if not value or not value.strip():
        return True
    for part in _LENGTH_SPLIT_RE.split(value.strip()):
        if not part:
            continue
        if part.endswith("%"):
            part = part[:-1]
        length = parse_length(part)
        if length is None or length != 0:
            return False
    return True


def split_font_stack(value: Optional[str]) -> List[str]:
    if not value:
        return []
    names: List[str] = []
    current = []
    quote = None
    for ch in value:
        if quote:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
        elif ch in {'"', "'"}:
            quote = ch
        elif ch == ",":
            name = "".join(current).strip()
            if name:
                names.append(name)
            current = []
        else:
            current.append(ch)
    name = "".join(current).strip()
    if name:
        names.append(name)
    return names


def join_font_stack(names: List[str]) -> str:
    generic = {
        "serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui",
        "ui-serif", "ui-sans-serif", "ui-monospace", "ui-rounded", "math",
        "emoji", "fangsong", "-apple-system", "blinkmacsystemfont",
    }
    out = []
    for name in names:
        if name.lower() in generic or re.fullmatch(r"[A-Za-z0-9_-]+", name):
            out.append(name)
        else:
            out.append('"' + name.replace('"', '\\"') + '"')
    return ", ".join(out)
