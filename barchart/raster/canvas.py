from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]
ClipRect = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def clip_box(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    clip: ClipRect | None = None,
) -> tuple[int, int, int, int] | None:
    """Intersect the half-open box ``[x0, x1) x [y0, y1)`` with the frame and ``clip``.

    Corners may be given in either order. Returns ``None`` when nothing is left.
    """

    left, top, right, bottom = 0, 0, dst.shape[1], dst.shape[0]
    if clip is not None:
        left = max(left, clip[0])
        top = max(top, clip[1])
        right = min(right, clip[2])
        bottom = min(bottom, clip[3])
    xa = max(left, min(x0, x1))
    xb = min(right, max(x0, x1))
    ya = max(top, min(y0, y1))
    yb = min(bottom, max(y0, y1))
    if xa >= xb or ya >= yb:
        return None
    return (xa, ya, xb, yb)


def blend_over(region: np.ndarray, color: RGBA, coverage: np.ndarray | None = None) -> None:
    # Chart frames are opaque: blend RGB in place and keep alpha at 255.
    alpha = color[3] / 255.0
    if coverage is not None:
        alpha = (alpha * coverage)[:, :, None]
    src = np.asarray(color[:3], dtype=np.float32)
    out = src * alpha + region[:, :, :3].astype(np.float32) * (1.0 - alpha)
    region[:, :, :3] = np.clip(out, 0, 255).astype(np.uint8)
    region[:, :, 3] = 255


def fill_rect(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: RGBA,
    *,
    clip: ClipRect | None = None,
) -> None:
    """Blend ``color`` over the half-open pixel box ``[x0, x1) x [y0, y1)``."""

    box = clip_box(dst, x0, y0, x1, y1, clip)
    if box is None:
        return
    xa, ya, xb, yb = box
    blend_over(dst[ya:yb, xa:xb], color)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, *, clip: ClipRect | None = None) -> None:
    fill_rect(dst, min(x0, x1), y, max(x0, x1) + 1, y + 1, color, clip=clip)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, *, clip: ClipRect | None = None) -> None:
    fill_rect(dst, x, min(y0, y1), x + 1, max(y0, y1) + 1, color, clip=clip)
