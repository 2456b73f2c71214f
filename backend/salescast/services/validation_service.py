r"""backend\salescast\services\validation_service.py"""

from __future__ import annotations

from typing import Optional, Sequence

from ..core.config import AnalyticsPolicy, load_policy
from ..models.schemas import Transaction, ValidationCheck, ValidationReport


class ValidationService:
    def __init__(self, config_root: Optional[str] = None, policy: Optional[AnalyticsPolicy] = None):
        self.policy = policy or load_policy(config_root)

    def run(self, transactions: Sequence[Transaction]) -> ValidationReport:
        checks = []

        def add(name: str, ok: bool, msg: str = "") -> None:
            checks.append(ValidationCheck(name=name, ok=bool(ok), message=msg))

        add("has_transactions", len(transactions) > 0, f"{len(transactions)} rows")

        negatives = sum(1 for tx in transactions if tx.quantity < 0 or tx.amount < 0)
        add("non_negative_values", negatives == 0, f"{negatives} rows with negative values")

        days = len({tx.tx_date for tx in transactions})
        add(
            "forecast_history",
            days >= self.policy.min_history_days,
            f"have {days} days, need {self.policy.min_history_days}",
        )
        add(
            "decomposition_history",
            days >= self.policy.decomposition_min_days,
            f"have {days} days, need {self.policy.decomposition_min_days}",
        )

        skus = len({tx.sku for tx in transactions})
        add("sku_count", skus > 0, f"{skus} SKUs")

        overall = all(check.ok for check in checks)
        return ValidationReport(ok=overall, checks=checks)
