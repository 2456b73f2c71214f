"""Routes exposing the daily series and dashboard analytics."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...core.config import load_policy
from ...core.errors import InsufficientDataError
from ...models import schemas
from ...services.series_service import (
    compute_kpis,
    fill_missing_dates,
    product_summaries,
    seasonal_decomposition,
)
from .transactions import _error_payload, _require_sku, _store

LOGGER = logging.getLogger(__name__)

router = APIRouter()

_policy = load_policy()


@router.get("/series/daily", response_model=List[schemas.DailyPoint])
def get_daily_series(
    sku: Optional[str] = Query(None, description="Restrict the series to one SKU"),
    fill_gaps: bool = Query(False, description="Insert zero-valued days for gaps"),
) -> List[schemas.DailyPoint]:
    """Return total sales per day, ascending by date."""

    _require_sku(sku)
    series = _store.daily_series(sku)
    return fill_missing_dates(series) if fill_gaps else series


@router.get("/series/kpis", response_model=schemas.KpiSummary)
def get_kpis() -> schemas.KpiSummary:
    return compute_kpis(_store.snapshot())


@router.get("/series/products", response_model=List[schemas.ProductSummary])
def get_products(
    search: Optional[str] = Query(None, description="Case-insensitive SKU filter"),
) -> List[schemas.ProductSummary]:
    return product_summaries(_store.snapshot(), search=search)


@router.get("/series/decomposition", response_model=List[schemas.DecompositionPoint])
def get_decomposition(
    sku: Optional[str] = Query(None, description="Restrict the series to one SKU"),
) -> List[schemas.DecompositionPoint]:
    """Return the trend / seasonal split of the daily series."""

    _require_sku(sku)
    try:
        return seasonal_decomposition(
            _store.daily_series(sku), min_points=_policy.decomposition_min_days
        )
    except InsufficientDataError as exc:
        LOGGER.warning("Decomposition rejected for sku=%s: %s", sku, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_error_payload("insufficient_data", str(exc)),
        ) from exc
