r"""backend/tests/test_series_api.py"""

from __future__ import annotations

import sys
from datetime import date, timedelta
from pathlib import Path

from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.salescast.main import app

client = TestClient(app)

START = date(2024, 1, 1)


def _row(i: int, sku: str, day_offset: int, amount: float, quantity: float = 1) -> dict:
    return {
        "order_id": f"ORD-{i}",
        "sku": sku,
        "tx_date": (START + timedelta(days=day_offset)).isoformat(),
        "quantity": quantity,
        "amount": amount,
        "store_id": "STORE-1",
    }


def test_transaction_snapshot_lifecycle() -> None:
    replaced = client.put(
        "/api/v1/transactions",
        json={"transactions": [_row(1, "A", 0, 5.0), _row(2, "B", 3, 7.0)]},
    )
    assert replaced.status_code == 200
    assert replaced.json()["count"] == 2

    appended = client.post("/api/v1/transactions", json={"transactions": [_row(3, "A", 5, 1.0)]})
    info = appended.json()
    assert info["count"] == 3
    assert info["skus"] == ["A", "B"]
    assert info["first_date"] == "2024-01-01"
    assert info["last_date"] == "2024-01-06"

    cleared = client.delete("/api/v1/transactions")
    assert cleared.json()["count"] == 0
    assert client.get("/api/v1/transactions").json()["skus"] == []


def test_negative_quantity_is_rejected() -> None:
    response = client.put(
        "/api/v1/transactions", json={"transactions": [_row(1, "A", 0, 5.0, quantity=-1)]}
    )

    assert response.status_code == 422


def test_daily_series_with_and_without_gap_filling() -> None:
    client.put(
        "/api/v1/transactions",
        json={
            "transactions": [
                _row(1, "A", 0, 5.0),
                _row(2, "B", 0, 2.5),
                _row(3, "A", 3, 4.0),
            ]
        },
    )

    raw = client.get("/api/v1/series/daily").json()
    assert [point["total_sales"] for point in raw] == [7.5, 4.0]

    filled = client.get("/api/v1/series/daily", params={"fill_gaps": True}).json()
    assert [point["date"] for point in filled] == [
        "2024-01-01",
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
    ]
    assert filled[1]["total_sales"] == 0.0

    only_b = client.get("/api/v1/series/daily", params={"sku": "B"}).json()
    assert only_b == [{"date": "2024-01-01", "total_sales": 2.5, "total_quantity": 1.0}]

    missing = client.get("/api/v1/series/daily", params={"sku": "C"})
    assert missing.status_code == 404


def test_kpis_and_product_search() -> None:
    client.put(
        "/api/v1/transactions",
        json={"transactions": [_row(1, "SHOE-1", 0, 30.0, 2), _row(2, "HAT-1", 1, 10.0, 4)]},
    )

    kpis = client.get("/api/v1/series/kpis").json()
    assert kpis["total_revenue"] == 40.0
    assert kpis["total_orders"] == 2
    assert kpis["avg_order_value"] == 20.0
    assert kpis["sold_items"] == 6.0

    products = client.get("/api/v1/series/products", params={"search": "shoe"}).json()
    assert [product["sku"] for product in products] == ["SHOE-1"]
    assert products[0]["avg_price"] == 15.0


def test_decomposition_requires_two_weeks() -> None:
    client.put(
        "/api/v1/transactions",
        json={"transactions": [_row(i, "A", i, 10.0 + i) for i in range(10)]},
    )

    short = client.get("/api/v1/series/decomposition")
    assert short.status_code == 422
    assert short.json()["detail"]["error"] == "insufficient_data"

    client.post("/api/v1/transactions/demo", params={"days": 30, "seed": 2})
    points = client.get("/api/v1/series/decomposition").json()
    assert len(points) == 30
    for point in points:
        assert abs(point["actual"] - point["trend"] - point["seasonal"]) < 1e-9
