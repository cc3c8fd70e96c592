from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fleetledger import models
from fleetledger.core.database import get_db
from fleetledger.schemas import PersonnelCreate, PersonnelOut, PersonnelStatsOut, PersonnelUpdate


router = APIRouter(prefix="/personnel", tags=["personnel"])

_REQUIRED_FIELDS = {"full_name", "role", "is_active"}


def _get_or_404(db: Session, personnel_id: int) -> models.Personnel:
    person = db.get(models.Personnel, personnel_id)
    if not person:
        raise HTTPException(status_code=404, detail="Personnel not found")
    return person


@router.get("", response_model=list[PersonnelOut])
def list_personnel(include_inactive: bool = False, db: Session = Depends(get_db)):
    q = db.query(models.Personnel)
    if not include_inactive:
        q = q.filter(models.Personnel.is_active.is_(True))
    return q.order_by(models.Personnel.full_name).all()


@router.get("/stats/overview", response_model=PersonnelStatsOut)
def personnel_stats(db: Session = Depends(get_db)):
    total = db.query(models.Personnel).count()
    active = db.query(models.Personnel).filter(models.Personnel.is_active.is_(True)).count()
    return PersonnelStatsOut(total_personnel=total, active_personnel=active, inactive_personnel=total - active)


@router.get("/{personnel_id}", response_model=PersonnelOut)
def get_personnel(personnel_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, personnel_id)


@router.post("", response_model=PersonnelOut, status_code=201)
def create_personnel(payload: PersonnelCreate, db: Session = Depends(get_db)):
    username = payload.username.strip().lower()
    dup = db.query(models.Personnel).filter(models.Personnel.username == username).first()
    if dup:
        raise HTTPException(status_code=409, detail="Username already exists")
    person = models.Personnel(**payload.model_dump(exclude={"username"}), username=username)
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


@router.patch("/{personnel_id}", response_model=PersonnelOut)
def update_personnel(personnel_id: int, payload: PersonnelUpdate, db: Session = Depends(get_db)):
    person = _get_or_404(db, personnel_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is None and key in _REQUIRED_FIELDS:
            continue
        setattr(person, key, value)
    db.commit()
    db.refresh(person)
    return person
