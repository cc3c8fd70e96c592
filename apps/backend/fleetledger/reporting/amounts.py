"""Money helpers shared by the aggregation functions.

Coercion never raises: anything that is not a finite number counts as zero.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Iterable

from pydantic import ValidationError

from ..models import TransactionStatus
from ..schemas import TransactionRecord


logger = logging.getLogger(__name__)

CANCELLED = TransactionStatus.CANCELLED.value


def to_number(value: Any) -> float:
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def revenue_of(record: TransactionRecord) -> float:
    return to_number(record.amount)


def expense_of(record: TransactionRecord) -> float:
    return to_number(record.expense)


def amounts_of(record: TransactionRecord) -> tuple[float, float]:
    """``(revenue, expense)``; ``is_expense`` is deliberately not consulted."""
    return revenue_of(record), expense_of(record)


def round2(value: float) -> float:
    # Half-up, like the figures shown on the dashboard
    return math.floor(value * 100 + 0.5) / 100


def margin(profit: float, revenue: float) -> float:
    return (profit / revenue) * 100 if revenue > 0 else 0.0


def percentage(part: float, total: float) -> str:
    return f"{(part / total) * 100:.2f}" if total > 0 else "0.00"


def label_or(value: str | None, sentinel: str) -> str:
    return value if value else sentinel


def as_records(records: Iterable[TransactionRecord | Mapping[str, Any]]) -> list[TransactionRecord]:
    """Accept records or plain mappings (e.g. raw query rows).

    Mappings that fail validation are logged and skipped. Cancelled records
    never reach the aggregations.
    """
    out: list[TransactionRecord] = []
    for record in records:
        if not isinstance(record, TransactionRecord):
            try:
                record = TransactionRecord.model_validate(record)
            except ValidationError as exc:
                logger.warning("Skipping malformed transaction %s: %s", record.get("id"), exc.errors()[0]["msg"])
                continue
        if record.status == CANCELLED:
            logger.debug("Skipping cancelled transaction %s", record.id)
            continue
        out.append(record)
    return out
