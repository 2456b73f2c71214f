r"""backend\salescast\api\v1\data.py"""

from __future__ import annotations

from fastapi import APIRouter

from ...models import schemas
from ...services.validation_service import ValidationService
from .transactions import _store

router = APIRouter()
_validation_service = ValidationService()


@router.get("/data/validate", response_model=schemas.ValidationReport)
def validate() -> schemas.ValidationReport:
    return _validation_service.run(_store.snapshot())
