from __future__ import annotations

import math
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.salescast.models.schemas import ForecastPoint
from backend.salescast.services.accuracy import fitted_pairs, mape, rmse


def test_perfect_predictions_score_zero() -> None:
    actual = [3.0, 0.0, 7.5, 12.0]

    assert rmse(actual, actual) == 0.0
    assert mape(actual, actual) == 0.0


def test_empty_inputs_score_zero() -> None:
    assert rmse([], []) == 0.0
    assert mape([], []) == 0.0


def test_rmse_treats_missing_predictions_as_zero() -> None:
    assert rmse([3.0, 4.0], [3.0]) == pytest.approx(math.sqrt(16 / 2))


def test_mape_skips_zero_actuals() -> None:
    # |10-5|/10 = 0.5 and |20-30|/20 = 0.5; the zero actual is excluded.
    assert mape([10.0, 0.0, 20.0], [5.0, 3.0, 30.0]) == pytest.approx(50.0)
    assert mape([0.0, 0.0], [1.0, 2.0]) == 0.0


def test_fitted_pairs_keeps_points_with_both_values() -> None:
    points = [
        ForecastPoint(date=date(2024, 1, 1), actual=5.0),
        ForecastPoint(date=date(2024, 1, 2), actual=6.0, forecast=5.5),
        ForecastPoint(date=date(2024, 1, 3), forecast=6.0, lower_ci=4.0, upper_ci=8.0),
    ]

    assert fitted_pairs(points) == ([6.0], [5.5])
