from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from fleetledger import models
from fleetledger.core.database import get_db
from fleetledger.reporting.amounts import round2
from fleetledger.reporting.calculator import CATEGORY_SENTINEL
from fleetledger.reporting.periods import to_utc_naive
from fleetledger.schemas import (
    CategoryStatsItem,
    TransactionCreate,
    TransactionOut,
    TransactionStatsOut,
    TransactionUpdate,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

_REFERENCES = (
    ("category_id", models.TransactionCategory, "Invalid category for transaction"),
    ("vehicle_id", models.Vehicle, "Invalid vehicle for transaction"),
    ("personnel_id", models.Personnel, "Invalid personnel for transaction"),
)


def _get_or_404(db: Session, txn_id: int) -> models.Transaction:
    txn = db.get(models.Transaction, txn_id)
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


def _check_references(db: Session, data: dict) -> None:
    for field, model, message in _REFERENCES:
        ref_id = data.get(field)
        if ref_id is not None and db.get(model, ref_id) is None:
            raise HTTPException(status_code=400, detail=message)


def _date_range(start: date | None, end: date | None) -> list:
    # start/end are calendar dates on the stored (UTC) timestamp
    conditions = []
    if start:
        conditions.append(models.Transaction.transaction_date >= datetime.combine(start, time.min))
    if end:
        conditions.append(models.Transaction.transaction_date < datetime.combine(end + timedelta(days=1), time.min))
    return conditions


def _totals(*columns):
    T = models.Transaction
    return (
        *columns,
        func.count(T.id),
        func.coalesce(func.sum(T.amount), 0),
        func.coalesce(func.sum(T.expense), 0),
        func.coalesce(func.avg(T.amount), 0),
    )


@router.get("", response_model=list[TransactionOut])
def list_transactions(
    response: Response,
    start: date | None = Query(None),
    end: date | None = Query(None),
    status: models.TransactionStatus | None = Query(None),
    category_id: list[int] | None = Query(None),
    vehicle_id: int | None = Query(None),
    personnel_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    q = db.query(models.Transaction).filter(*_date_range(start, end))
    if status:
        q = q.filter(models.Transaction.status == status)
    if category_id:
        q = q.filter(models.Transaction.category_id.in_(category_id))
    if vehicle_id:
        q = q.filter(models.Transaction.vehicle_id == vehicle_id)
    if personnel_id:
        q = q.filter(models.Transaction.personnel_id == personnel_id)

    total = q.count()
    response.headers["X-Total-Count"] = str(total)
    return (
        q.order_by(models.Transaction.transaction_date.desc(), models.Transaction.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )


@router.get("/stats/overview", response_model=TransactionStatsOut)
def transaction_stats(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    T = models.Transaction
    count, amount, expense, average, vehicles, personnel = (
        db.query(*_totals(), func.count(func.distinct(T.vehicle_id)), func.count(func.distinct(T.personnel_id)))
        .filter(T.status != models.TransactionStatus.CANCELLED, *_date_range(start, end))
        .one()
    )
    return TransactionStatsOut(
        transaction_count=count,
        total_amount=float(amount),
        total_expense=float(expense),
        average_amount=round2(float(average)),
        unique_vehicles=vehicles,
        unique_personnel=personnel,
    )


@router.get("/stats/by-category", response_model=list[CategoryStatsItem])
def transaction_stats_by_category(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    """Totals per category, every category listed even without transactions."""
    T, C = models.Transaction, models.TransactionCategory
    in_scope = [T.status != models.TransactionStatus.CANCELLED, *_date_range(start, end)]
    rows = (
        db.query(*_totals(C.id, C.name))
        .select_from(C)
        .outerjoin(T, and_(T.category_id == C.id, *in_scope))
        .group_by(C.id, C.name)
        .order_by(C.id)
        .all()
    )
    unassigned = db.query(*_totals(T.category_id)).filter(T.category_id.is_(None), *in_scope).group_by(T.category_id).all()

    items = [
        CategoryStatsItem(
            category_id=category_id,
            category_name=name or CATEGORY_SENTINEL,
            transaction_count=count,
            total_amount=float(amount),
            total_expense=float(expense),
            average_amount=round2(float(average)),
        )
        for category_id, name, count, amount, expense, average in rows
    ]
    items += [
        CategoryStatsItem(
            category_id=None,
            category_name=CATEGORY_SENTINEL,
            transaction_count=count,
            total_amount=float(amount),
            total_expense=float(expense),
            average_amount=round2(float(average)),
        )
        for _, count, amount, expense, average in unassigned
    ]
    items.sort(key=lambda item: item.total_amount, reverse=True)
    return items


@router.get("/{txn_id}", response_model=TransactionOut)
def get_transaction(txn_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, txn_id)


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionCreate, db: Session = Depends(get_db)):
    data = payload.model_dump()
    _check_references(db, data)
    if data["transaction_date"] is None:
        data["transaction_date"] = models.now_utc_naive()
    else:
        data["transaction_date"] = to_utc_naive(data["transaction_date"])
    txn = models.Transaction(**data)
    db.add(txn)
    db.commit()
    db.refresh(txn)
    logger.info("Created transaction %s (amount=%s, expense=%s)", txn.id, txn.amount, txn.expense)
    return txn


@router.patch("/{txn_id}", response_model=TransactionOut)
def update_transaction(txn_id: int, payload: TransactionUpdate, db: Session = Depends(get_db)):
    txn = _get_or_404(db, txn_id)
    data = payload.model_dump(exclude_unset=True)
    _check_references(db, data)
    for key, value in data.items():
        if key == "transaction_date":
            if value is None:
                continue
            value = to_utc_naive(value)
        elif value is None and key in ("amount", "is_expense", "status"):
            continue
        setattr(txn, key, value)
    db.commit()
    db.refresh(txn)
    return txn


@router.post("/{txn_id}/cancel", response_model=TransactionOut)
def cancel_transaction(txn_id: int, db: Session = Depends(get_db)):
    txn = _get_or_404(db, txn_id)
    if txn.status == models.TransactionStatus.CANCELLED:
        raise HTTPException(status_code=409, detail="Transaction already cancelled")
    txn.status = models.TransactionStatus.CANCELLED
    db.commit()
    db.refresh(txn)
    logger.info("Cancelled transaction %s", txn.id)
    return txn


@router.delete("/{txn_id}", status_code=204)
def delete_transaction(txn_id: int, db: Session = Depends(get_db)):
    txn = _get_or_404(db, txn_id)
    db.delete(txn)
    db.commit()
    return None
