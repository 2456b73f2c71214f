"""In-process owner of the current transaction snapshot."""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from ..models.schemas import DailyPoint, SnapshotInfo, Transaction
from .series_service import build_daily_series, filter_by_sku

LOGGER = logging.getLogger(__name__)

Snapshot = Tuple[Transaction, ...]
Listener = Callable[[Snapshot], None]


class TransactionStore:
    """Hold an immutable snapshot of transactions and announce replacements.

    Readers always get a complete tuple; writers swap it under a lock and then
    notify subscribers with the new snapshot.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()) -> None:
        self._lock = threading.Lock()
        self._snapshot: Snapshot = tuple(transactions)
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ------------------------------------------------------------------
    def replace(self, transactions: Iterable[Transaction]) -> Snapshot:
        return self._swap(tuple(transactions), append=False)

    def extend(self, transactions: Iterable[Transaction]) -> Snapshot:
        return self._swap(tuple(transactions), append=True)

    def clear(self) -> Snapshot:
        return self._swap((), append=False)

    def _swap(self, rows: Snapshot, append: bool) -> Snapshot:
        with self._lock:
            snapshot = self._snapshot + rows if append else rows
            self._snapshot = snapshot
            listeners = list(self._listeners)
        LOGGER.info("Transaction snapshot now holds %s rows", len(snapshot))
        for listener in listeners:
            listener(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    def skus(self) -> List[str]:
        """Distinct SKUs in order of first appearance."""

        return list(dict.fromkeys(tx.sku for tx in self._snapshot))

    def date_span(self) -> Tuple[Optional[date], Optional[date]]:
        snapshot = self._snapshot
        if not snapshot:
            return None, None
        dates = [tx.tx_date for tx in snapshot]
        return min(dates), max(dates)

    def daily_series(self, sku: Optional[str] = None) -> List[DailyPoint]:
        return build_daily_series(filter_by_sku(self._snapshot, sku))

    def info(self) -> SnapshotInfo:
        first, last = self.date_span()
        return SnapshotInfo(count=len(self), skus=self.skus(), first_date=first, last_date=last)
