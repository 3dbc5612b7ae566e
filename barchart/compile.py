from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
import torch

from barchart.layout import ChartLayout


@dataclass(frozen=True)
class FullRewrite:
    tensor_h_w_4: torch.Tensor


@dataclass(frozen=True)
class ReplaceRect:
    x: int
    y: int
    width: int
    height: int
    rect_h_w_4: torch.Tensor


WriteOp: TypeAlias = FullRewrite | ReplaceRect


@dataclass(frozen=True)
class WriteBatch:
    """Operations a host surface applies, in order, to its RGBA255 frame."""

    operations: list[WriteOp]


def frame_tensor(frame_rgba: np.ndarray) -> torch.Tensor:
    if frame_rgba.dtype != np.uint8 or frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("chart frame must be a uint8 (H, W, 4) array")
    return torch.from_numpy(np.ascontiguousarray(frame_rgba))


def scroll_region(layout: ChartLayout, frame_shape: tuple[int, ...]) -> tuple[int, int, int, int] | None:
    """``(x, y, width, height)`` of the pixels a horizontal scroll repaints, clipped to the frame.

    Scrolling moves the bars, their data and value labels and the gridlines
    under them. The grid value labels left of the y axis stay put.
    """

    moving = layout.plot_area.union(layout.data_label_area).union(layout.data_value_area)
    left, top, right, bottom = moving.as_clip()
    x0, y0 = max(0, left), max(0, top)
    x1, y1 = min(frame_shape[1], right), min(frame_shape[0], bottom)
    if x1 <= x0 or y1 <= y0:
        return None
    return (x0, y0, x1 - x0, y1 - y0)


def compile_frame_batch(frame_rgba: np.ndarray) -> WriteBatch:
    return WriteBatch([FullRewrite(frame_tensor(frame_rgba))])


def compile_scroll_batch(frame_rgba: np.ndarray, layout: ChartLayout) -> WriteBatch:
    """Emit only the scrolled region of a freshly rendered chart frame.

    Falls back to a full rewrite when the region does not overlap the frame.
    """

    tensor = frame_tensor(frame_rgba)
    region = scroll_region(layout, tuple(tensor.shape))
    if region is None:
        return WriteBatch([FullRewrite(tensor)])
    x, y, w, h = region
    patch = tensor[y : y + h, x : x + w].contiguous()
    return WriteBatch([ReplaceRect(x=x, y=y, width=w, height=h, rect_h_w_4=patch)])
