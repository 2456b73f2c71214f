from __future__ import annotations

import sys
from collections import defaultdict, deque
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, List

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.salescast.core import observability as obs  # noqa: E402
from backend.salescast.models.schemas import DailyPoint, Transaction  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_api_state(monkeypatch) -> None:
    """Start every test with an empty snapshot and no rate limiting."""

    from backend.salescast.api.v1 import transactions as tx_api

    tx_api._store.clear()
    monkeypatch.setattr(obs.TokenAndRateLimitMiddleware, "_token", None, raising=False)
    monkeypatch.setattr(obs.TokenAndRateLimitMiddleware, "_per_minute", 0, raising=False)
    monkeypatch.setattr(
        obs.TokenAndRateLimitMiddleware, "_buckets", defaultdict(deque), raising=False
    )


def make_series(values: Iterable[float], start: date = date(2024, 1, 1)) -> List[DailyPoint]:
    """Return a contiguous daily series with the given sales values."""

    return [
        DailyPoint(date=start + timedelta(days=i), total_sales=float(v), total_quantity=1.0)
        for i, v in enumerate(values)
    ]


def make_tx(
    sku: str,
    day: date,
    quantity: float = 1.0,
    amount: float = 10.0,
    order_id: str = "ORD-1",
    store_id: str = "STORE-1",
) -> Transaction:
    return Transaction(
        order_id=order_id,
        sku=sku,
        tx_date=day,
        quantity=quantity,
        amount=amount,
        store_id=store_id,
    )
