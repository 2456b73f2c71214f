"""Synthetic transactions used to explore the app without an upload."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import List, Optional

import numpy as np

from ..models.schemas import Transaction

DEMO_SKUS = ("SKU-001", "SKU-002")
DEMO_STORE = "STORE-Main"


def generate_demo_transactions(
    days: int = 300,
    end: Optional[date] = None,
    seed: Optional[int] = None,
) -> List[Transaction]:
    """Return one transaction per day with an upward trend and weekly swing.

    Amounts follow ``100 + 0.5 * i + 20 * sin(i / 7)`` plus uniform noise in
    ``[-20, 20)``; SKUs alternate day by day.
    """

    if days <= 0:
        return []

    end_day = end or date.today()
    rng = np.random.default_rng(seed)
    noise = rng.uniform(-20.0, 20.0, size=days)

    transactions: List[Transaction] = []
    for i in range(days):
        raw = 100.0 + i * 0.5 + math.sin(i / 7) * 20.0 + float(noise[i])
        transactions.append(
            Transaction(
                order_id=f"ORD-{1000 + i}",
                sku=DEMO_SKUS[i % len(DEMO_SKUS)],
                tx_date=end_day - timedelta(days=days - 1 - i),
                quantity=float(max(1, math.floor(raw / 10))),
                amount=max(10.0, raw),
                store_id=DEMO_STORE,
            )
        )
    return transactions
