from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
import math
from typing import Any

import numpy as np

from barchart.datum import Datum
from barchart.errors import ChartDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_data(values: Any, labels: Sequence[Any] | None = None) -> tuple[Datum, ...]:
    """Build an immutable dataset from Datum items, (value, label) pairs or a 1-D value container."""

    if values is None:
        raise ChartDataError("values input is required")

    if _is_item_sequence(values):
        items = list(values)
        if items and all(isinstance(item, Datum) for item in items):
            if labels is not None:
                raise ChartDataError("labels cannot be combined with Datum input")
            for i, item in enumerate(items):
                _check_finite(item.value, index=i)
            return tuple(items)
        if items and all(_is_pair(item) for item in items):
            if labels is not None:
                raise ChartDataError("labels cannot be combined with (value, label) pairs")
            out = []
            for i, (raw, label) in enumerate(items):
                out.append(Datum(_coerce_scalar(raw, index=i), str(label)))
            return tuple(out)

    if labels is None and pd is not None and isinstance(values, pd.Series):
        labels = [str(idx) for idx in values.index.tolist()]

    arr = _coerce_1d_numeric(values)
    if labels is None:
        label_list = [f"d{i + 1}" for i in range(arr.size)]
    else:
        label_list = [str(label) for label in labels]
        if len(label_list) != arr.size:
            raise ChartDataError(f"values and labels length mismatch: {arr.size} != {len(label_list)}")

    for i, value in enumerate(arr.tolist()):
        _check_finite(value, index=i)
    return tuple(Datum(value, label) for value, label in zip(arr.tolist(), label_list, strict=True))


def _is_item_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_pair(item: Any) -> bool:
    return isinstance(item, (list, tuple)) and len(item) == 2 and isinstance(item[1], str)


def _check_finite(value: float, *, index: int) -> None:
    if not math.isfinite(value):
        raise ChartDataError(f"value at index {index} is not finite: {value!r}")


def _coerce_scalar(raw: Any, *, index: int) -> float:
    if raw is None or isinstance(raw, (str, bytes, bool)):
        raise ChartDataError(f"value at index {index} is not numeric: {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"value at index {index} is not numeric: {raw!r}") from exc
    _check_finite(value, index=index)
    return value


def _coerce_1d_numeric(value: Any) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ChartDataError("values must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy())

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError("values must be 1-D")
        return _coerce_ndarray(value)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(list(value), dtype=object))

    raise ChartDataError(f"unsupported values input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f"}:
        return arr.astype(np.float64, copy=False)

    if arr.ndim != 1:
        raise ChartDataError("values must be 1-D")
    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        out[i] = _coerce_scalar(raw, index=i)
    return out
