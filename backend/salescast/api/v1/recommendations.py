"""Routes for inventory reorder recommendations."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from ...models import schemas
from ...services.inventory_service import InventoryService
from .transactions import _store

LOGGER = logging.getLogger(__name__)

router = APIRouter()

_inventory_service = InventoryService()


@router.get("/recommendations", response_model=List[schemas.Recommendation])
def get_recommendations(
    status: Optional[schemas.RecommendationStatus] = Query(
        None, description="Only return recommendations with this status"
    ),
) -> List[schemas.Recommendation]:
    """Return reorder advice per SKU, items needing a reorder first."""

    recommendations = _inventory_service.recommend(_store.snapshot())
    if status is not None:
        recommendations = [rec for rec in recommendations if rec.status == status]
    return recommendations
