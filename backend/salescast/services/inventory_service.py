r"""backend\salescast\services\inventory_service.py

Safety-stock and reorder-point recommendations per SKU.

Demand statistics are population mean and standard deviation over the
per-transaction quantities of each SKU.  The reorder point covers expected
demand over the supplier lead time plus a safety stock sized for the target
service level.

Current stock levels come from an injected ``stock_lookup``.  Without one,
``demo_stock_level`` picks one of three deterministic scenarios from the SKU
string so that demo data always shows a mix of reorder and healthy items.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from ..core.config import AnalyticsPolicy, load_policy
from ..models.schemas import Recommendation, RecommendationStatus, Transaction

LOGGER = logging.getLogger(__name__)

StockLookup = Callable[[str], float]

# Fraction of the reorder point held on hand in each demo scenario.
DEMO_STOCK_FACTORS = (0.4, 1.2, 2.5)


def demo_stock_level(sku: str, reorder_point: float) -> float:
    """Return a placeholder on-hand quantity derived from the SKU string."""

    factor = DEMO_STOCK_FACTORS[len(sku) % len(DEMO_STOCK_FACTORS)]
    return float(math.floor(reorder_point * factor))


def demand_statistics(quantities: Iterable[float]) -> tuple[float, float]:
    """Return the population ``(mean, std)`` of ``quantities``."""

    samples = np.asarray(list(quantities), dtype=float)
    if samples.size == 0:
        return 0.0, 0.0
    # ``np.std`` defaults to population std (ddof=0) which we use here
    return float(np.mean(samples)), float(np.std(samples))


def calculate_reorder_point(
    mean: float, std: float, lead_time_days: float, z_value: float
) -> tuple[float, float]:
    """Return ``(safety_stock, reorder_point)`` for a lead time in days."""

    safety_stock = z_value * std * math.sqrt(lead_time_days)
    reorder_point = mean * lead_time_days + safety_stock
    return safety_stock, reorder_point


def compute_recommendations(
    transactions: Iterable[Transaction],
    policy: Optional[AnalyticsPolicy] = None,
    stock_lookup: Optional[StockLookup] = None,
) -> List[Recommendation]:
    """Return one recommendation per SKU, reorders first.

    Within each status group SKUs keep the order of their first transaction.
    """

    policy = policy or AnalyticsPolicy()
    lead_time = policy.lead_time_days

    quantities: Dict[str, List[float]] = {}
    for tx in transactions:
        quantities.setdefault(tx.sku, []).append(float(tx.quantity))

    results: List[Recommendation] = []
    for sku, samples in quantities.items():
        mean, std = demand_statistics(samples)
        safety_stock, reorder_point = calculate_reorder_point(
            mean, std, lead_time, policy.service_level_z
        )

        if stock_lookup is not None:
            current_stock = float(stock_lookup(sku))
        else:
            current_stock = demo_stock_level(sku, reorder_point)

        if current_stock < reorder_point:
            status = RecommendationStatus.REORDER
            # Order up to twice the reorder point.
            suggested = int(math.ceil(2 * reorder_point - current_stock))
        else:
            status = RecommendationStatus.HEALTHY
            suggested = 0

        results.append(
            Recommendation(
                sku=sku,
                avg_demand=mean,
                std_dev=std,
                safety_stock=safety_stock,
                reorder_point=reorder_point,
                current_stock=current_stock,
                status=status,
                suggested_order=suggested,
                lead_time=lead_time,
                service_level=policy.service_level_pct,
            )
        )

    # ``sorted`` is stable, so first-appearance order survives within a group.
    return sorted(results, key=lambda rec: rec.status != RecommendationStatus.REORDER)


class InventoryService:
    """Produce recommendations using the configured policy and stock source."""

    def __init__(
        self,
        config_root: Optional[str] = None,
        policy: Optional[AnalyticsPolicy] = None,
        stock_lookup: Optional[StockLookup] = None,
    ) -> None:
        self.policy = policy or load_policy(config_root)
        self.stock_lookup = stock_lookup
        if stock_lookup is None:
            LOGGER.debug("No stock feed configured; using demo stock scenarios.")

    # ------------------------------------------------------------------
    def recommend(self, transactions: Iterable[Transaction]) -> List[Recommendation]:
        recommendations = compute_recommendations(
            transactions, policy=self.policy, stock_lookup=self.stock_lookup
        )
        reorders = sum(1 for rec in recommendations if rec.status == RecommendationStatus.REORDER)
        LOGGER.info(
            "Computed %s recommendations (%s to reorder)", len(recommendations), reorders
        )
        return recommendations
