from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from fleetledger import models
from fleetledger.core.database import get_db
from fleetledger.schemas import CategoryCreate, CategoryOut, CategoryUpdate


router = APIRouter(prefix="/categories", tags=["categories"])


def _get_or_404(db: Session, category_id: int) -> models.TransactionCategory:
    category = db.get(models.TransactionCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("", response_model=list[CategoryOut])
def list_categories(include_inactive: bool = False, db: Session = Depends(get_db)):
    q = db.query(models.TransactionCategory)
    if not include_inactive:
        q = q.filter(models.TransactionCategory.is_active.is_(True))
    return q.order_by(models.TransactionCategory.name).all()


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    name = payload.name.strip()
    dup = db.query(models.TransactionCategory).filter(models.TransactionCategory.name == name).first()
    if dup:
        raise HTTPException(status_code=409, detail="Category name already exists")
    category = models.TransactionCategory(
        name=name,
        description=payload.description,
        is_active=payload.is_active,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    data = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key == "description"
    }
    if "name" in data:
        name = data["name"].strip()
        dup = (
            db.query(models.TransactionCategory)
            .filter(models.TransactionCategory.name == name, models.TransactionCategory.id != category_id)
            .first()
        )
        if dup:
            raise HTTPException(status_code=409, detail="Category name already exists")
        data["name"] = name
    for key, value in data.items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    # Transactions keep their history and fall into the unassigned bucket
    db.query(models.Transaction).filter(models.Transaction.category_id == category_id).update(
        {models.Transaction.category_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    return None
