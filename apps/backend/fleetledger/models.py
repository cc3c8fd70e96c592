from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .core.database import Base


def now_utc_naive() -> datetime:
    """Return the current UTC instant as a naive datetime (storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    # Persist the lower-case values, not the member names
    return [member.value for member in enum_cls]


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, onupdate=now_utc_naive, nullable=False)


class PersonnelRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    OTHER = "other"


class TransactionCategory(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(back_populates="category")


class Vehicle(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plate: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    brand: Mapped[str | None] = mapped_column(String(60))
    model: Mapped[str | None] = mapped_column(String(60))
    year: Mapped[int | None] = mapped_column(Integer)
    customer_name: Mapped[str | None] = mapped_column(String(120))
    customer_phone: Mapped[str | None] = mapped_column(String(32))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(back_populates="vehicle")


class Personnel(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    username: Mapped[str] = mapped_column(String(60), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    phone: Mapped[str | None] = mapped_column(String(32))
    role: Mapped[PersonnelRole] = mapped_column(
        SAEnum(PersonnelRole, name="personnel_role", values_callable=_enum_values),
        nullable=False,
        default=PersonnelRole.EMPLOYEE,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(back_populates="personnel")


class Transaction(Base, TimestampMixin):
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # amount = revenue charged to the customer, expense = cost of delivering it
    amount: Mapped[float] = mapped_column(Numeric(18, 2), nullable=False, default=0)
    expense: Mapped[float | None] = mapped_column(Numeric(18, 2), nullable=True)
    is_expense: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(Text)
    # Naive UTC; business-local days are UTC+3
    transaction_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=now_utc_naive)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("transactioncategory.id", ondelete="SET NULL"))
    vehicle_id: Mapped[int | None] = mapped_column(ForeignKey("vehicle.id", ondelete="SET NULL"))
    personnel_id: Mapped[int | None] = mapped_column(ForeignKey("personnel.id", ondelete="SET NULL"))
    payment_method: Mapped[PaymentMethod | None] = mapped_column(SAEnum(PaymentMethod, name="payment_method", values_callable=_enum_values))
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(TransactionStatus, name="txn_status", values_callable=_enum_values),
        nullable=False,
        default=TransactionStatus.COMPLETED,
    )

    category: Mapped[TransactionCategory | None] = relationship(back_populates="transactions")
    vehicle: Mapped[Vehicle | None] = relationship(back_populates="transactions")
    personnel: Mapped[Personnel | None] = relationship(back_populates="transactions")

    __table_args__ = (
        Index("ix_transaction_date_status", "transaction_date", "status"),
        Index("ix_transaction_category", "category_id"),
    )
