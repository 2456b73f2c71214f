r"""backend\salescast\models\schemas.py

Pydantic models used throughout the engine and the API.

These models serve as both request payload validators and response
serialisation schemas.  The analytical services accept and return them
directly so the HTTP layer never has to translate between shapes.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Transaction(BaseModel):
    """A single sales line supplied by the ingestion side."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    sku: str
    tx_date: date
    quantity: float = Field(..., ge=0, description="Units sold on this line")
    amount: float = Field(..., ge=0, description="Monetary value of the line")
    store_id: str


class TransactionBatch(BaseModel):
    """Request body used to load or append transactions."""

    transactions: List[Transaction]


class SnapshotInfo(BaseModel):
    """Short description of the transaction snapshot currently held."""

    count: int
    skus: List[str]
    first_date: Optional[date] = None
    last_date: Optional[date] = None


class DailyPoint(BaseModel):
    """Sales totals for one calendar day."""

    date: date
    total_sales: float = 0.0
    total_quantity: float = 0.0


class ForecastModel(str, Enum):
    MOVING_AVERAGE = "MOVING_AVERAGE"
    HOLT_WINTERS = "HOLT_WINTERS"


class ForecastParams(BaseModel):
    """Model selection and tuning constants for a forecast run."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model: ForecastModel = ForecastModel.MOVING_AVERAGE
    horizon: int = Field(14, description="Number of days to project forward")
    window_size: int = Field(7, alias="windowSize", description="Moving average window")
    alpha: float = Field(0.5, description="Level smoothing")
    beta: float = Field(0.4, description="Trend smoothing")
    gamma: float = Field(0.1, description="Seasonal smoothing")
    season_length: int = Field(7, alias="seasonLength", description="Days per season")


class ForecastPoint(BaseModel):
    """A fitted (in-sample) or projected (out-of-sample) point."""

    date: date
    actual: Optional[float] = None
    forecast: Optional[float] = None
    lower_ci: Optional[float] = None
    upper_ci: Optional[float] = None


class ForecastRun(BaseModel):
    """A forecast series together with its in-sample fit quality."""

    model_config = ConfigDict(protected_namespaces=())

    model: ForecastModel
    horizon: int
    sku: Optional[str] = None
    points: List[ForecastPoint]
    rmse: float = Field(..., description="Root mean square error over the fitted history")
    mape: float = Field(..., description="Mean absolute percentage error, in percent")


class RecommendationStatus(str, Enum):
    REORDER = "Reorder"
    HEALTHY = "Healthy"


class Recommendation(BaseModel):
    """Reorder advice for a single SKU."""

    sku: str
    avg_demand: float = Field(..., description="Mean quantity per transaction")
    std_dev: float = Field(..., description="Population standard deviation of quantity")
    safety_stock: float
    reorder_point: float = Field(..., description="Stock level at which to reorder")
    current_stock: float
    status: RecommendationStatus
    suggested_order: int = Field(..., description="Units to order, 0 when healthy")
    lead_time: int = Field(..., description="Supplier lead time in days")
    service_level: float = Field(..., description="Target service level, in percent")


class KpiSummary(BaseModel):
    total_revenue: float
    total_orders: int
    avg_order_value: float
    sold_items: float


class ProductSummary(BaseModel):
    sku: str
    total_sales: float
    total_quantity: float
    avg_price: float
    trend: List[float]


class DecompositionPoint(BaseModel):
    date: date
    actual: float
    trend: float
    seasonal: float = Field(..., description="Actual minus trend (seasonality plus noise)")


class ValidationCheck(BaseModel):
    name: str
    ok: bool
    message: str = ""


class ValidationReport(BaseModel):
    ok: bool
    checks: List[ValidationCheck]
