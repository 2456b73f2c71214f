r"""backend\salescast\api\v1\transactions.py

Routes that load, extend and clear the transaction snapshot.

Parsing uploaded files is the caller's job; these endpoints accept
already-structured transactions.  The snapshot lives in ``_store`` and every
other router reads from it.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...models import schemas
from ...services.demo_data import generate_demo_transactions
from ...services.transaction_store import TransactionStore

LOGGER = logging.getLogger(__name__)

router = APIRouter()

_store = TransactionStore()


def _error_payload(code: str, message: str) -> dict[str, str]:
    """Return a standardised error payload."""

    return {"error": code, "message": message}


def _require_sku(sku: Optional[str]) -> None:
    """Reject requests naming a SKU that has no transactions."""

    if sku and sku not in _store.skus():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=_error_payload("sku_not_found", f"SKU '{sku}' has no transactions."),
        )


@router.get("/transactions", response_model=schemas.SnapshotInfo)
def get_snapshot() -> schemas.SnapshotInfo:
    """Describe the transactions currently loaded."""

    return _store.info()


@router.put("/transactions", response_model=schemas.SnapshotInfo)
def replace_transactions(batch: schemas.TransactionBatch) -> schemas.SnapshotInfo:
    """Replace the snapshot with the supplied transactions."""

    _store.replace(batch.transactions)
    LOGGER.info("Loaded %s transactions", len(batch.transactions))
    return _store.info()


@router.post("/transactions", response_model=schemas.SnapshotInfo)
def append_transactions(batch: schemas.TransactionBatch) -> schemas.SnapshotInfo:
    """Append transactions to the current snapshot."""

    _store.extend(batch.transactions)
    return _store.info()


@router.delete("/transactions", response_model=schemas.SnapshotInfo)
def clear_transactions() -> schemas.SnapshotInfo:
    _store.clear()
    return _store.info()


@router.post("/transactions/demo", response_model=schemas.SnapshotInfo)
def load_demo_data(
    days: int = Query(300, ge=1, le=3650, description="Number of days of demo history"),
    seed: Optional[int] = Query(None, description="Random seed for reproducible noise"),
) -> schemas.SnapshotInfo:
    """Replace the snapshot with generated demo transactions."""

    _store.replace(generate_demo_transactions(days=days, seed=seed))
    return _store.info()
