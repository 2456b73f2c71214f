"""Routes for demand forecasting."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from ...core.errors import InsufficientDataError, InvalidParameterError
from ...models import schemas
from ...services.forecasting_service import ForecastingService, forecast_to_csv
from .transactions import _error_payload, _require_sku, _store

LOGGER = logging.getLogger(__name__)

router = APIRouter()

MAX_FORECAST_HORIZON_DAYS = 365

_forecast_service = ForecastingService()


def _run(params: schemas.ForecastParams, sku: Optional[str]) -> schemas.ForecastRun:
    """Run the forecast and translate service errors into HTTP errors."""

    _require_sku(sku)
    if params.horizon > MAX_FORECAST_HORIZON_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_payload(
                "invalid_parameter",
                f"horizon must not exceed {MAX_FORECAST_HORIZON_DAYS} days.",
            ),
        )

    try:
        return _forecast_service.forecast(_store.snapshot(), params, sku=sku)
    except InvalidParameterError as exc:
        LOGGER.warning("Forecast rejected for sku=%s: %s", sku, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_payload("invalid_parameter", str(exc)),
        ) from exc
    except InsufficientDataError as exc:
        LOGGER.warning("Forecast rejected for sku=%s: %s", sku, exc)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_error_payload("insufficient_data", str(exc)),
        ) from exc
    except ValueError as exc:
        LOGGER.warning("Forecast rejected for sku=%s: %s", sku, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_error_payload("invalid_request", str(exc)),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive programming
        LOGGER.exception("Unexpected error while forecasting sku=%s", sku)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_error_payload("forecast_failed", "An unexpected error occurred while forecasting."),
        ) from exc


@router.post("/forecasts", response_model=schemas.ForecastRun)
def create_forecast(
    params: schemas.ForecastParams,
    response: Response,
    sku: Optional[str] = Query(None, description="Forecast a single SKU instead of all sales"),
) -> schemas.ForecastRun:
    """Return fitted history, the projected horizon and fit metrics."""

    LOGGER.info("Forecast request received for sku=%s model=%s", sku, params.model.value)
    run = _run(params, sku)
    response.headers["model_used"] = run.model.value
    return run


@router.post("/forecasts/export")
def export_forecast(
    params: schemas.ForecastParams,
    sku: Optional[str] = Query(None, description="Forecast a single SKU instead of all sales"),
) -> Response:
    """Return the forecast points as a CSV download."""

    run = _run(params, sku)
    filename = f"forecast_{sku or 'ALL'}_{date.today().isoformat()}.csv"
    return Response(
        content=forecast_to_csv(run.points),
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "model_used": run.model.value,
        },
    )
