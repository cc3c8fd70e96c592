from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from fleetledger import models
from fleetledger.reporting.periods import Period, business_month
from fleetledger.schemas import TransactionRecord


logger = logging.getLogger(__name__)


class ReportDataService:
    """Fetch the flat, joined transaction rows a report period covers.

    Cancelled transactions never leave this service, so no cancelled record can
    reach the aggregation functions.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def fetch_records(
        self,
        period: Period,
        category_ids: Optional[Iterable[int]] = None,
    ) -> list[TransactionRecord]:
        lower, upper, upper_inclusive = period.query_window()
        txn = models.Transaction
        query = (
            self.db.query(
                txn.id,
                txn.amount,
                txn.expense,
                txn.is_expense,
                txn.description,
                txn.transaction_date,
                txn.category_id,
                txn.vehicle_id,
                txn.personnel_id,
                txn.payment_method,
                txn.status,
                models.TransactionCategory.name.label("category_name"),
                models.Vehicle.plate.label("vehicle_plate"),
                models.Personnel.full_name.label("personnel_name"),
            )
            .outerjoin(models.TransactionCategory, txn.category_id == models.TransactionCategory.id)
            .outerjoin(models.Vehicle, txn.vehicle_id == models.Vehicle.id)
            .outerjoin(models.Personnel, txn.personnel_id == models.Personnel.id)
            .filter(txn.status != models.TransactionStatus.CANCELLED)
            .filter(txn.transaction_date >= lower)
        )
        if upper_inclusive:
            query = query.filter(txn.transaction_date <= upper)
        else:
            query = query.filter(txn.transaction_date < upper)

        ids = list(category_ids or [])
        if ids:
            query = query.filter(txn.category_id.in_(ids))

        rows = query.order_by(txn.transaction_date.asc(), txn.id.asc()).all()
        logger.debug(
            "Fetched %d transactions for %s period %s..%s (categories=%s)",
            len(rows), period.type, lower, upper, ids or "all",
        )
        # Yearly reports bucket by month; attach the business-local month up front
        with_month = period.type == "yearly"
        return [self._to_record(row, with_month=with_month) for row in rows]

    @staticmethod
    def _to_record(row, *, with_month: bool = False) -> TransactionRecord:
        return TransactionRecord(
            id=row.id,
            amount=row.amount,
            expense=row.expense,
            is_expense=bool(row.is_expense),
            description=row.description,
            transaction_date=row.transaction_date,
            category_id=row.category_id,
            category_name=row.category_name,
            vehicle_id=row.vehicle_id,
            vehicle_plate=row.vehicle_plate,
            personnel_id=row.personnel_id,
            personnel_name=row.personnel_name,
            payment_method=row.payment_method.value if row.payment_method else None,
            status=row.status.value if row.status else None,
            month=business_month(row.transaction_date) if with_month else None,
        )
