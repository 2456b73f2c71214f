r"""backend\salescast\services\series_service.py

Daily sales series construction and the descriptive analytics built on it.

Transactions arrive sparse: many lines per day on busy days and nothing at
all on others.  The forecasting models assume one observation per calendar
day, so the series is built in two explicit steps: ``build_daily_series``
aggregates per distinct date and ``fill_missing_dates`` inserts zero-valued
days for every gap.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from ..core.errors import InsufficientDataError
from ..models.schemas import (
    DailyPoint,
    DecompositionPoint,
    KpiSummary,
    ProductSummary,
    Transaction,
)

LOGGER = logging.getLogger(__name__)

_TX_COLUMNS = ["order_id", "sku", "tx_date", "quantity", "amount", "store_id"]


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Return the transactions as a ``pd.DataFrame`` with the canonical columns."""

    records = [tx.model_dump() for tx in transactions]
    frame = pd.DataFrame(records, columns=_TX_COLUMNS)
    frame["quantity"] = frame["quantity"].astype(float)
    frame["amount"] = frame["amount"].astype(float)
    return frame


def filter_by_sku(transactions: Iterable[Transaction], sku: Optional[str]) -> List[Transaction]:
    """Return the transactions for ``sku``; all of them when ``sku`` is empty."""

    if not sku:
        return list(transactions)
    return [tx for tx in transactions if tx.sku == sku]


def build_daily_series(transactions: Iterable[Transaction]) -> List[DailyPoint]:
    """Aggregate transactions into one ``DailyPoint`` per distinct date.

    The result is sorted ascending by date and is *not* gap filled.
    """

    frame = transactions_frame(transactions)
    if frame.empty:
        return []

    grouped = frame.groupby("tx_date", sort=True)[["amount", "quantity"]].sum()
    return [
        DailyPoint(
            date=row.Index,
            total_sales=float(row.amount),
            total_quantity=float(row.quantity),
        )
        for row in grouped.itertuples()
    ]


def fill_missing_dates(series: Sequence[DailyPoint]) -> List[DailyPoint]:
    """Return a contiguous daily series covering the input's date range.

    Days absent from ``series`` are emitted as zero-valued points.  The output
    has ``(last - first).days + 1`` entries.
    """

    points = sorted(series, key=lambda point: point.date)
    if not points:
        return []

    by_date: Dict = {point.date: point for point in points}
    days = pd.date_range(points[0].date, points[-1].date, freq="D")

    filled: List[DailyPoint] = []
    for stamp in days:
        day = stamp.date()
        existing = by_date.get(day)
        filled.append(existing if existing is not None else DailyPoint(date=day))
    return filled


# ---------------------------------------------------------------------------
# Dashboard helpers


def compute_kpis(transactions: Sequence[Transaction]) -> KpiSummary:
    """Return headline revenue and volume figures."""

    total_orders = len(transactions)
    total_revenue = float(sum(tx.amount for tx in transactions))
    sold_items = float(sum(tx.quantity for tx in transactions))
    avg_order_value = total_revenue / total_orders if total_orders else 0.0
    return KpiSummary(
        total_revenue=total_revenue,
        total_orders=total_orders,
        avg_order_value=avg_order_value,
        sold_items=sold_items,
    )


def product_summaries(
    transactions: Iterable[Transaction],
    search: Optional[str] = None,
    trend_points: int = 20,
) -> List[ProductSummary]:
    """Summarise sales per SKU with a downsampled amount trend.

    SKUs appear in the order of their first transaction by date.  ``search``
    is a case-insensitive substring match on the SKU.
    """

    frame = transactions_frame(transactions)
    if frame.empty:
        return []

    frame = frame.sort_values("tx_date", kind="stable")
    needle = search.lower() if search else None

    summaries: List[ProductSummary] = []
    for sku, group in frame.groupby("sku", sort=False):
        if needle and needle not in str(sku).lower():
            continue
        total_sales = float(group["amount"].sum())
        total_quantity = float(group["quantity"].sum())
        amounts = [float(v) for v in group["amount"].tolist()]
        step = max(1, math.ceil(len(amounts) / max(trend_points, 1)))
        summaries.append(
            ProductSummary(
                sku=str(sku),
                total_sales=total_sales,
                total_quantity=total_quantity,
                avg_price=total_sales / total_quantity if total_quantity else 0.0,
                trend=amounts[::step],
            )
        )
    return summaries


def seasonal_decomposition(
    series: Sequence[DailyPoint],
    window: int = 7,
    min_points: int = 14,
) -> List[DecompositionPoint]:
    """Split the daily series into a moving-average trend and a remainder.

    The trend is a centred ``window``-day mean wherever the full window fits;
    at the edges the actual value stands in for the trend.
    """

    if len(series) < min_points:
        raise InsufficientDataError(min_points, len(series), what="decompose the series")

    contiguous = fill_missing_dates(series)
    actual = pd.Series([point.total_sales for point in contiguous], dtype=float)
    trend = actual.rolling(window, center=True).mean().fillna(actual)

    LOGGER.debug("Decomposed %s days with a %s-day window", len(contiguous), window)
    return [
        DecompositionPoint(
            date=point.date,
            actual=float(value),
            trend=float(level),
            seasonal=float(value - level),
        )
        for point, value, level in zip(contiguous, actual, trend)
    ]
