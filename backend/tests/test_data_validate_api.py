r"""backend/tests/test_data_validate_api.py"""

from __future__ import annotations

import sys
from pathlib import Path

from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.salescast.main import app

client = TestClient(app)


def test_validate_empty_snapshot() -> None:
    response = client.get("/api/v1/data/validate")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is False
    checks = {check["name"]: check for check in payload["checks"]}
    assert checks["has_transactions"]["ok"] is False
    assert checks["non_negative_values"]["ok"] is True


def test_validate_demo_snapshot() -> None:
    client.post("/api/v1/transactions/demo", params={"days": 30, "seed": 4})

    payload = client.get("/api/v1/data/validate").json()

    assert payload["ok"] is True
    assert {check["name"] for check in payload["checks"]} == {
        "has_transactions",
        "non_negative_values",
        "forecast_history",
        "decomposition_history",
        "sku_count",
    }
