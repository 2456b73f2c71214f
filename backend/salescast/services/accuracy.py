"""Forecast accuracy metrics."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..models.schemas import ForecastPoint


def _aligned(actual: Sequence[float], predicted: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    actual_arr = np.asarray(actual, dtype=float)
    pred_arr = np.zeros(actual_arr.size, dtype=float)
    available = min(actual_arr.size, len(predicted))
    if available:
        pred_arr[:available] = np.asarray(predicted[:available], dtype=float)
    return actual_arr, pred_arr


def rmse(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Root mean square error; missing predictions count as zero."""

    actual_arr, pred_arr = _aligned(actual, predicted)
    if actual_arr.size == 0:
        return 0.0
    return float(np.sqrt(np.mean((actual_arr - pred_arr) ** 2)))


def mape(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Mean absolute percentage error in percent.

    Positions where the actual value is zero are left out of both the sum and
    the count.
    """

    actual_arr, pred_arr = _aligned(actual, predicted)
    mask = actual_arr != 0
    if not mask.any():
        return 0.0
    errors = np.abs((actual_arr[mask] - pred_arr[mask]) / actual_arr[mask])
    return float(np.mean(errors) * 100.0)


def fitted_pairs(points: Iterable[ForecastPoint]) -> Tuple[List[float], List[float]]:
    """Return ``(actual, forecast)`` lists for points that carry both values."""

    actual: List[float] = []
    forecast: List[float] = []
    for point in points:
        if point.actual is None or point.forecast is None:
            continue
        actual.append(float(point.actual))
        forecast.append(float(point.forecast))
    return actual, forecast
