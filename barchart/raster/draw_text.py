from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from barchart.raster.canvas import RGBA, ClipRect, blend_over, clip_box


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans Mono"
DEFAULT_FONT_SIZE_PX = 12.0
FONT_FALLBACK_PATTERNS = (
    "dejavusansmono",
    "dejavusans",
    "liberationmono",
    "menlo",
    "monaco",
    "couriernew",
    "courier",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    clip: ClipRect | None = None,
) -> None:
    """Draw ``text`` with the top-left corner of its ink box at ``(x, y)``."""

    if not text:
        return
    mask = _glyph_mask(text, _load_font(font_family, font_size_px))
    h, w = mask.shape
    box = clip_box(dst, x, y, x + w, y + h, clip)
    if box is None:
        return
    xa, ya, xb, yb = box
    coverage = mask[ya - y : yb - y, xa - x : xb - x].astype(np.float32) / 255.0
    if not np.any(coverage > 0):
        return
    blend_over(dst[ya:yb, xa:xb], color, coverage)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    font = _load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=256)
def _glyph_mask(text: str, font: Font) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    path = _resolve_font_path(font_family)
    if path is None:
        LOGGER.warning("no TrueType font matching %r found; using Pillow default font", font_family)
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(path), size=size)
    except OSError as exc:
        LOGGER.warning("could not load font %s (%s); using Pillow default font", path, exc)
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=1)
def _installed_fonts() -> tuple[tuple[str, Path], ...]:
    found: list[tuple[str, Path]] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            for path in sorted(base.rglob(ext)):
                found.append((path.stem.lower().replace(" ", ""), path))
    return tuple(found)


def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower().replace(" ", "") or DEFAULT_FONT_FAMILY.lower().replace(" ", "")
    fonts = _installed_fonts()
    for pattern in (wanted,) + FONT_FALLBACK_PATTERNS:
        # Prefer "DejaVuSansMono" over "DejaVuSansMono-Bold".
        for stem, path in fonts:
            if stem == pattern:
                return path
        for stem, path in fonts:
            if stem.startswith(pattern):
                return path
    return None
