from __future__ import annotations

import math
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.salescast.core.config import AnalyticsPolicy
from backend.salescast.models.schemas import RecommendationStatus
from backend.salescast.services.inventory_service import (
    InventoryService,
    calculate_reorder_point,
    compute_recommendations,
    demand_statistics,
    demo_stock_level,
)
from conftest import make_tx

DAY = date(2024, 5, 1)


def _sku_lines(sku: str, quantities):
    return [make_tx(sku, DAY, quantity=q) for q in quantities]


def test_demand_statistics_uses_population_std() -> None:
    mean, std = demand_statistics([4, 6, 8])

    assert mean == pytest.approx(6.0)
    assert std == pytest.approx(math.sqrt(8 / 3))
    assert demand_statistics([]) == (0.0, 0.0)


def test_calculate_reorder_point() -> None:
    safety_stock, reorder_point = calculate_reorder_point(6.0, 2.0, 9, 1.65)

    assert safety_stock == pytest.approx(1.65 * 2.0 * 3)
    assert reorder_point == pytest.approx(54.0 + 9.9)


def test_demo_stock_level_cycles_with_sku_length() -> None:
    assert demo_stock_level("ABC", 49.13) == 19.0
    assert demo_stock_level("ABCD", 49.13) == 58.0
    assert demo_stock_level("ABCDE", 49.13) == 122.0


def test_recommendation_fields_for_reorder_sku() -> None:
    [rec] = compute_recommendations(_sku_lines("ABC", [4, 6, 8]), policy=AnalyticsPolicy())

    expected_ss = 1.65 * math.sqrt(8 / 3) * math.sqrt(7)
    assert rec.avg_demand == pytest.approx(6.0)
    assert rec.safety_stock == pytest.approx(expected_ss)
    assert rec.reorder_point == pytest.approx(42.0 + expected_ss)
    assert rec.current_stock == 19.0
    assert rec.status == RecommendationStatus.REORDER
    assert rec.suggested_order == math.ceil(2 * rec.reorder_point - 19.0) == 80
    assert rec.lead_time == 7
    assert rec.service_level == 95.0


def test_reorders_sort_first_and_keep_input_order() -> None:
    transactions = []
    for sku in ("ABCD", "ABCDE", "ABC", "XYZ"):
        transactions += _sku_lines(sku, [4, 6, 8])

    recs = compute_recommendations(transactions, policy=AnalyticsPolicy())

    assert [r.sku for r in recs] == ["ABC", "XYZ", "ABCD", "ABCDE"]
    assert [r.status for r in recs] == [
        RecommendationStatus.REORDER,
        RecommendationStatus.REORDER,
        RecommendationStatus.HEALTHY,
        RecommendationStatus.HEALTHY,
    ]
    assert all(r.suggested_order == 0 for r in recs[2:])
    assert len({r.sku for r in recs}) == len(recs)


def test_constant_demand_has_no_safety_stock() -> None:
    [rec] = compute_recommendations(_sku_lines("ABC", [5, 5, 5]), policy=AnalyticsPolicy())

    assert rec.std_dev == 0.0
    assert rec.safety_stock == 0.0
    assert rec.reorder_point == pytest.approx(35.0)


def test_zero_demand_is_healthy() -> None:
    [rec] = compute_recommendations(_sku_lines("ABC", [0, 0]), policy=AnalyticsPolicy())

    assert rec.reorder_point == 0.0
    assert rec.status == RecommendationStatus.HEALTHY
    assert rec.suggested_order == 0


def test_stock_lookup_overrides_demo_levels() -> None:
    transactions = _sku_lines("ABCD", [4, 6, 8]) + _sku_lines("ABCDE", [1, 2])

    recs = compute_recommendations(
        transactions, policy=AnalyticsPolicy(), stock_lookup=lambda sku: 0.0
    )

    assert all(r.status == RecommendationStatus.REORDER for r in recs)
    assert all(r.current_stock == 0.0 for r in recs)
    assert recs[0].suggested_order == math.ceil(2 * recs[0].reorder_point)


def test_inventory_service_applies_policy() -> None:
    policy = AnalyticsPolicy(lead_time_days=4, service_level_z=2.0, service_level_pct=97.7)
    service = InventoryService(policy=policy, stock_lookup=lambda sku: 100.0)

    [rec] = service.recommend(_sku_lines("SKU-9", [2, 4]))

    assert rec.safety_stock == pytest.approx(2.0 * 1.0 * 2.0)
    assert rec.reorder_point == pytest.approx(12.0 + 4.0)
    assert rec.lead_time == 4
    assert rec.service_level == 97.7
    assert rec.status == RecommendationStatus.HEALTHY


def test_empty_snapshot_has_no_recommendations() -> None:
    assert compute_recommendations([], policy=AnalyticsPolicy()) == []
