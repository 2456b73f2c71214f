r"""backend\salescast\services\forecasting_service.py

Short-horizon sales forecasting over a gap-filled daily series.

Two interchangeable models are available: a trailing moving average and an
additive Holt-Winters (triple exponential smoothing) model.  Both take the
same ``(series, params)`` input and return the same list of
``ForecastPoint``: in-sample points carrying the observed value and, where
the model has enough history, a fitted value, followed by ``horizon``
out-of-sample points with a confidence band.

The models treat list position as elapsed days, so the series handed to them
must come out of ``fill_missing_dates``.  ``ForecastingService`` takes care of
that, of the minimum-history guard and of the accuracy metrics.

Holt-Winters reports ``fitted[i - 1]`` as the in-sample forecast for day
``i``.  ``fitted`` is computed from the state *after* observing day ``i - 1``,
which makes it an approximation of a strict one-step-ahead forecast.
"""

from __future__ import annotations

import io
import logging
from datetime import date, timedelta
from math import sqrt
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.config import AnalyticsPolicy, load_policy
from ..core.errors import InsufficientDataError, InvalidParameterError
from ..models.schemas import (
    DailyPoint,
    ForecastModel,
    ForecastParams,
    ForecastPoint,
    ForecastRun,
    Transaction,
)
from .accuracy import fitted_pairs, mape, rmse
from .series_service import build_daily_series, fill_missing_dates, filter_by_sku

LOGGER = logging.getLogger(__name__)

# Two-sided 95% normal quantile used for every confidence band.
Z_95: float = 1.96


# ---------------------------------------------------------------------------
# Helper utilities (kept top-level for straightforward unit testing)


def validate_params(params: ForecastParams) -> None:
    """Raise ``InvalidParameterError`` for parameters no model can use."""

    if params.horizon < 0:
        raise InvalidParameterError("horizon", params.horizon, "a non-negative integer")
    if params.window_size < 1:
        raise InvalidParameterError("window_size", params.window_size, "at least 1")
    if params.season_length < 1:
        raise InvalidParameterError("season_length", params.season_length, "at least 1")


def minimum_history(params: ForecastParams) -> int:
    """Return the number of daily points the selected model needs."""

    if params.model == ForecastModel.HOLT_WINTERS:
        return max(2, params.season_length)
    return params.window_size + 1


def _future_dates(last_day: date, horizon: int) -> List[date]:
    return [last_day + timedelta(days=step) for step in range(1, horizon + 1)]


def _ensure_history(series: Sequence[DailyPoint], params: ForecastParams) -> None:
    required = minimum_history(params)
    if len(series) < required:
        raise InsufficientDataError(required, len(series))


# ---------------------------------------------------------------------------
# Models


def moving_average_forecast(
    series: Sequence[DailyPoint], params: ForecastParams
) -> List[ForecastPoint]:
    """Trailing moving average with a flat projection.

    The fitted value at position ``i`` is the mean of the ``window_size``
    values strictly before ``i``.  Every future step repeats the mean of the
    last window, with a constant-width band of ``1.96`` residual deviations.
    """

    validate_params(params)
    _ensure_history(series, params)

    window = params.window_size
    values = pd.Series([float(point.total_sales) for point in series], dtype=float)
    fitted = values.rolling(window).mean().shift(1)

    points: List[ForecastPoint] = []
    for point, actual, fit in zip(series, values, fitted):
        points.append(
            ForecastPoint(
                date=point.date,
                actual=float(actual),
                forecast=None if pd.isna(fit) else float(fit),
            )
        )

    residuals = (values - fitted).dropna()
    spread = sqrt(float((residuals**2).sum()) / max(len(residuals) - 1, 1))

    next_value = float(values.iloc[-window:].mean())
    half_width = Z_95 * spread
    for day in _future_dates(series[-1].date, params.horizon):
        points.append(
            ForecastPoint(
                date=day,
                forecast=next_value,
                lower_ci=next_value - half_width,
                upper_ci=next_value + half_width,
            )
        )
    return points


def holt_winters_forecast(
    series: Sequence[DailyPoint], params: ForecastParams
) -> List[ForecastPoint]:
    """Additive Holt-Winters triple exponential smoothing.

    Initial state: level is the first value, trend the first difference, and
    each seasonal index the first season's value minus that level.  The band
    widens with ``sqrt(h)``; forecasts and lower bounds are floored at zero.
    """

    validate_params(params)
    _ensure_history(series, params)

    alpha, beta, gamma = params.alpha, params.beta, params.gamma
    season_length = params.season_length
    values = [float(point.total_sales) for point in series]
    n = len(values)

    level = values[0]
    trend = values[1] - values[0]
    seasonals = [values[i % season_length] - level for i in range(season_length)]

    fitted: List[float] = []
    points: List[ForecastPoint] = []
    for i, value in enumerate(values):
        season_idx = i % season_length
        prev_level, prev_trend = level, trend
        prev_season = seasonals[season_idx]

        level = alpha * (value - prev_season) + (1 - alpha) * (prev_level + prev_trend)
        trend = beta * (level - prev_level) + (1 - beta) * prev_trend
        seasonals[season_idx] = gamma * (value - level) + (1 - gamma) * prev_season

        fitted.append(level + trend + seasonals[season_idx])
        points.append(
            ForecastPoint(
                date=series[i].date,
                actual=value,
                forecast=value if i == 0 else fitted[i - 1],
            )
        )

    residuals = np.asarray(values) - np.asarray(fitted)
    spread = float(np.sqrt(np.mean(residuals**2)))

    for step, day in enumerate(_future_dates(series[-1].date, params.horizon), start=1):
        projection = level + step * trend + seasonals[(n + step - 1) % season_length]
        uncertainty = Z_95 * spread * sqrt(step)
        points.append(
            ForecastPoint(
                date=day,
                forecast=max(0.0, projection),
                lower_ci=max(0.0, projection - uncertainty),
                upper_ci=projection + uncertainty,
            )
        )
    return points


_MODELS: Dict[ForecastModel, Callable[[Sequence[DailyPoint], ForecastParams], List[ForecastPoint]]] = {
    ForecastModel.MOVING_AVERAGE: moving_average_forecast,
    ForecastModel.HOLT_WINTERS: holt_winters_forecast,
}


def run_forecast(series: Sequence[DailyPoint], params: ForecastParams) -> List[ForecastPoint]:
    """Dispatch to the model selected by ``params.model``."""

    return _MODELS[params.model](series, params)


def forecast_to_csv(points: Sequence[ForecastPoint]) -> str:
    """Render forecast points as CSV; absent values are left blank."""

    frame = pd.DataFrame(
        [point.model_dump() for point in points],
        columns=["date", "actual", "forecast", "lower_ci", "upper_ci"],
    )
    rounded = ["forecast", "lower_ci", "upper_ci"]
    frame[rounded] = frame[rounded].astype(float).round(2)
    buffer = io.StringIO()
    frame.to_csv(buffer, index=False, na_rep="")
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Core service implementation


class ForecastingService:
    """Run forecasts over a transaction snapshot and score the fit."""

    def __init__(
        self,
        config_root: Optional[str] = None,
        policy: Optional[AnalyticsPolicy] = None,
    ) -> None:
        self.policy = policy or load_policy(config_root)

    # ------------------------------------------------------------------
    def resolve_params(self, params: ForecastParams) -> ForecastParams:
        """Fill parameters the caller did not set from the configured defaults."""

        missing = {
            key: value
            for key, value in self.policy.forecast_defaults.items()
            if key not in params.model_fields_set
        }
        if not missing:
            return params
        return ForecastParams.model_validate({**params.model_dump(), **missing})

    # ------------------------------------------------------------------
    def forecast(
        self,
        transactions: Sequence[Transaction],
        params: ForecastParams,
        sku: Optional[str] = None,
    ) -> ForecastRun:
        """Forecast total daily sales, optionally for a single SKU."""

        params = self.resolve_params(params)
        validate_params(params)

        daily = build_daily_series(filter_by_sku(transactions, sku))
        if len(daily) < self.policy.min_history_days:
            raise InsufficientDataError(self.policy.min_history_days, len(daily))

        LOGGER.info(
            "Forecasting sku=%s model=%s horizon=%s days=%s",
            sku or "ALL",
            params.model.value,
            params.horizon,
            len(daily),
        )
        points = run_forecast(fill_missing_dates(daily), params)

        actual, predicted = fitted_pairs(points)
        return ForecastRun(
            model=params.model,
            horizon=params.horizon,
            sku=sku,
            points=points,
            rmse=rmse(actual, predicted),
            mape=mape(actual, predicted),
        )
