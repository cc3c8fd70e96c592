from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from fleetledger import models
from fleetledger.core.database import get_db
from fleetledger.schemas import CustomerSummary, VehicleCreate, VehicleOut, VehicleUpdate


router = APIRouter(prefix="/vehicles", tags=["vehicles"])


def normalize_plate(plate: str) -> str:
    return "".join(plate.split()).upper()


@router.get("", response_model=list[VehicleOut])
def list_vehicles(include_inactive: bool = False, db: Session = Depends(get_db)):
    q = db.query(models.Vehicle)
    if not include_inactive:
        q = q.filter(models.Vehicle.is_active.is_(True))
    return q.order_by(models.Vehicle.plate).all()


@router.get("/customers", response_model=list[CustomerSummary])
def list_customers(
    response: Response,
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Vehicles grouped by owner (name and phone) with their transaction totals."""
    V, T = models.Vehicle, models.Transaction
    q = db.query(V).filter(V.customer_name.isnot(None), V.customer_name != "")
    if search and search.strip():
        term = f"%{search.strip()}%"
        q = q.filter(
            or_(
                V.customer_name.ilike(term),
                V.customer_phone.ilike(term),
                V.plate.ilike(f"%{normalize_plate(search)}%"),
            )
        )
    vehicles = q.order_by(V.plate).all()

    totals = {
        vehicle_id: (count, revenue, last)
        for vehicle_id, count, revenue, last in db.query(
            T.vehicle_id,
            func.count(T.id),
            func.coalesce(func.sum(T.amount), 0),
            func.max(T.transaction_date),
        )
        .filter(T.vehicle_id.in_([v.id for v in vehicles]), T.status != models.TransactionStatus.CANCELLED)
        .group_by(T.vehicle_id)
    }

    customers: dict[tuple[str, str | None], CustomerSummary] = {}
    for vehicle in vehicles:
        key = (vehicle.customer_name, vehicle.customer_phone)
        entry = customers.get(key)
        if entry is None:
            entry = CustomerSummary(
                customer_name=vehicle.customer_name,
                customer_phone=vehicle.customer_phone,
                vehicle_count=0,
                transaction_count=0,
                total_revenue=0,
                last_transaction_date=None,
                vehicle_plates=[],
            )
            customers[key] = entry
        entry.vehicle_count += 1
        entry.vehicle_plates.append(vehicle.plate)
        count, revenue, last = totals.get(vehicle.id, (0, 0, None))
        entry.transaction_count += count
        entry.total_revenue += float(revenue)
        if last is not None and (entry.last_transaction_date is None or last > entry.last_transaction_date):
            entry.last_transaction_date = last

    ordered = sorted(customers.values(), key=lambda c: (-c.total_revenue, c.customer_name))
    response.headers["X-Total-Count"] = str(len(ordered))
    return ordered[(page - 1) * page_size : page * page_size]


@router.get("/{plate}", response_model=VehicleOut)
def get_vehicle_by_plate(plate: str, db: Session = Depends(get_db)):
    vehicle = db.query(models.Vehicle).filter(models.Vehicle.plate == normalize_plate(plate)).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.post("", response_model=VehicleOut, status_code=201)
def create_vehicle(payload: VehicleCreate, db: Session = Depends(get_db)):
    dup = db.query(models.Vehicle).filter(models.Vehicle.plate == payload.plate).first()
    if dup:
        raise HTTPException(status_code=409, detail="Plate already registered")
    vehicle = models.Vehicle(**payload.model_dump())
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle


@router.patch("/{vehicle_id}", response_model=VehicleOut)
def update_vehicle(vehicle_id: int, payload: VehicleUpdate, db: Session = Depends(get_db)):
    vehicle = db.get(models.Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "is_active" and value is None:
            continue
        setattr(vehicle, key, value)
    db.commit()
    db.refresh(vehicle)
    return vehicle
