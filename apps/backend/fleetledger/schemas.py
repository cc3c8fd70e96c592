from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator

from .models import PaymentMethod, PersonnelRole, TransactionStatus


# ===== Record keeping =====

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str]
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class VehicleCreate(BaseModel):
    plate: str = Field(..., min_length=1, max_length=20)
    brand: Optional[str] = Field(default=None, max_length=60)
    model: Optional[str] = Field(default=None, max_length=60)
    year: Optional[int] = Field(default=None, ge=1900, le=3000)
    customer_name: Optional[str] = Field(default=None, max_length=120)
    customer_phone: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = True

    @field_validator("plate")
    @classmethod
    def _normalize_plate(cls, v: str) -> str:
        # "34 abc 123" and "34ABC123" must be the same vehicle
        return "".join(v.split()).upper()


class VehicleUpdate(BaseModel):
    brand: Optional[str] = Field(default=None, max_length=60)
    model: Optional[str] = Field(default=None, max_length=60)
    year: Optional[int] = Field(default=None, ge=1900, le=3000)
    customer_name: Optional[str] = Field(default=None, max_length=120)
    customer_phone: Optional[str] = Field(default=None, max_length=32)
    is_active: Optional[bool] = None


class VehicleOut(BaseModel):
    id: int
    plate: str
    brand: Optional[str]
    model: Optional[str]
    year: Optional[int]
    customer_name: Optional[str]
    customer_phone: Optional[str]
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class PersonnelCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=120)
    username: str = Field(..., min_length=3, max_length=60)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    role: PersonnelRole = PersonnelRole.EMPLOYEE
    is_active: bool = True


class PersonnelUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    role: Optional[PersonnelRole] = None
    is_active: Optional[bool] = None


class PersonnelOut(BaseModel):
    id: int
    full_name: str
    username: str
    email: Optional[str]
    phone: Optional[str]
    role: PersonnelRole
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class TransactionCreate(BaseModel):
    amount: float = Field(default=0, ge=0)
    expense: Optional[float] = Field(default=None, ge=0)
    is_expense: bool = False
    description: Optional[str] = None
    transaction_date: Optional[datetime] = None
    category_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    personnel_id: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    status: TransactionStatus = TransactionStatus.COMPLETED
    model_config = ConfigDict(extra="ignore")


class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, ge=0)
    expense: Optional[float] = Field(default=None, ge=0)
    is_expense: Optional[bool] = None
    description: Optional[str] = None
    transaction_date: Optional[datetime] = None
    category_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    personnel_id: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    status: Optional[TransactionStatus] = None


class TransactionOut(BaseModel):
    id: int
    amount: float
    expense: Optional[float]
    is_expense: bool
    description: Optional[str]
    transaction_date: datetime
    category_id: Optional[int]
    vehicle_id: Optional[int]
    personnel_id: Optional[int]
    payment_method: Optional[PaymentMethod]
    status: TransactionStatus
    model_config = ConfigDict(from_attributes=True)


class TransactionStatsOut(BaseModel):
    transaction_count: int
    total_amount: float
    total_expense: float
    average_amount: float
    unique_vehicles: int
    unique_personnel: int


class CategoryStatsItem(BaseModel):
    category_id: Optional[int]
    category_name: str
    transaction_count: int
    total_amount: float
    total_expense: float
    average_amount: float


class PersonnelStatsOut(BaseModel):
    total_personnel: int
    active_personnel: int
    inactive_personnel: int


class CustomerSummary(BaseModel):
    customer_name: str
    customer_phone: Optional[str]
    vehicle_count: int
    transaction_count: int
    total_revenue: float
    last_transaction_date: Optional[datetime]
    vehicle_plates: list[str]


# ===== Aggregation input =====

class TransactionRecord(BaseModel):
    """Flat, already-joined transaction row handed to the aggregation engine.

    ``amount``/``expense`` are kept exactly as the data provider returned them;
    the engine coerces them (non-numeric values count as zero).
    """

    id: Any = None
    amount: Any = None
    expense: Any = None
    is_expense: Optional[bool] = Field(default=False, validation_alias=AliasChoices("is_expense", "isExpense"))
    description: Optional[str] = None
    transaction_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("transaction_date", "transactionDate"),
    )
    category_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("category_id", "categoryId"))
    category_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("category_name", "categoryName"))
    vehicle_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("vehicle_id", "vehicleId"))
    vehicle_plate: Optional[str] = Field(default=None, validation_alias=AliasChoices("vehicle_plate", "vehiclePlate"))
    personnel_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("personnel_id", "personnelId"))
    personnel_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("personnel_name", "personnelName"),
    )
    payment_method: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("payment_method", "paymentMethod"),
    )
    status: Optional[str] = None
    # Business-local month, when the query already computed it
    month: Optional[int] = None
    model_config = ConfigDict(from_attributes=True, frozen=True)


# ===== Profit reports =====

class ProfitSummary(BaseModel):
    total_revenue: float
    total_expense: float
    total_profit: float
    profit_margin: float
    transaction_count: int
    average_transaction: float


class BreakdownItem(BaseModel):
    key: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    percentage: str


class CategoryAnalysisItem(BaseModel):
    category: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    transaction_count: int


class VehicleAnalysisItem(BaseModel):
    vehicle_plate: str
    vehicle_info: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    transaction_count: int


class PersonnelAnalysisItem(BaseModel):
    personnel: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    transaction_count: int
    average_transaction: float


class DailyTrendItem(BaseModel):
    date: dt.date
    day_name: str
    revenue: float
    expense: float
    profit: float
    transaction_count: int


class DailyBreakdownItem(BaseModel):
    date: dt.date
    day: int  # 1 = Sunday … 7 = Saturday
    day_name: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    transaction_count: int


class MonthlyBreakdownItem(BaseModel):
    month: int
    month_name: str
    revenue: float
    expense: float
    profit: float
    profit_margin: float
    transaction_count: int


class GeneralStats(BaseModel):
    revenue_transaction_count: int
    expense_transaction_count: int
    max_revenue: float
    max_expense: float
    average_revenue: float
    average_expense: float
    active_vehicle_count: int
    active_personnel_count: int
    used_category_count: int


class TopTransactionItem(BaseModel):
    id: Any
    date: Optional[dt.date]
    vehicle_plate: str
    personnel: str
    category: str
    description: Optional[str]
    revenue: float
    expense: float
    net_effect: float
    payment_method: str
    status: Optional[str]


class BasicAnalysis(BaseModel):
    period_label: str
    total_revenue: float
    total_expense: float
    net_profit: float
    profit_margin: float
    transaction_count: int
    average_transaction: float


class ReportBreakdowns(BaseModel):
    by_category: list[BreakdownItem]
    by_vehicle: list[BreakdownItem]
    by_personnel: list[BreakdownItem]


class ReportTrend(BaseModel):
    granularity: Literal["daily", "monthly"]
    daily: Optional[list[DailyTrendItem]] = None
    monthly: Optional[list[MonthlyBreakdownItem]] = None


class AggregationReport(BaseModel):
    summary: ProfitSummary
    breakdowns: ReportBreakdowns
    trend: ReportTrend


class ReportTransaction(BaseModel):
    id: Any
    amount: float
    expense: float
    profit: float
    description: Optional[str]
    transaction_date: Optional[datetime]
    category_name: Optional[str]
    vehicle_plate: Optional[str]
    personnel_name: Optional[str]
    is_expense: bool


class PeriodOut(BaseModel):
    type: str
    start: datetime | dt.date
    end: datetime | dt.date
    date: Optional[dt.date] = None
    day_name: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    month_name: Optional[str] = None
    week: Optional[int] = None
    day_count: Optional[int] = None


class ProfitReportBreakdowns(BaseModel):
    categories: list[BreakdownItem] | list[CategoryAnalysisItem]
    vehicles: list[BreakdownItem] | list[VehicleAnalysisItem] = Field(default_factory=list)
    personnel: list[PersonnelAnalysisItem] = Field(default_factory=list)
    monthly: Optional[list[MonthlyBreakdownItem]] = None


class ProfitReportData(BaseModel):
    period: PeriodOut
    summary: ProfitSummary
    average_monthly_profit: Optional[float] = None
    average_daily_profit: Optional[float] = None
    breakdowns: ProfitReportBreakdowns
    daily_trend: Optional[list[DailyTrendItem]] = None
    daily_breakdown: Optional[list[DailyBreakdownItem]] = None
    general_stats: Optional[GeneralStats] = None
    basic_analysis: Optional[BasicAnalysis] = None
    top_transactions: Optional[list[TopTransactionItem]] = None
    transactions: list[ReportTransaction]


class ProfitReportOut(BaseModel):
    success: bool = True
    data: ProfitReportData


# ===== Revenue reports =====

class RevenueSummary(BaseModel):
    total_revenue: float
    revenue_transaction_count: int
    average_revenue: float
    total_transaction_count: int
    revenue_percentage: str


class CategoryRevenueItem(BaseModel):
    category: str
    revenue: float
    transaction_count: int
    percentage: str


class DailyRevenueItem(BaseModel):
    date: dt.date
    day_name: str
    revenue: float
    revenue_transaction_count: int
    transaction_count: int


class WeeklyRevenueItem(BaseModel):
    week_start: dt.date
    revenue: float
    revenue_transaction_count: int
    transaction_count: int


class MonthlyRevenueItem(BaseModel):
    year: int
    month: int
    month_name: str
    revenue: float
    revenue_transaction_count: int
    transaction_count: int


class RevenueReportBreakdowns(BaseModel):
    categories: list[CategoryRevenueItem]
    daily: Optional[list[DailyRevenueItem]] = None
    weekly: Optional[list[WeeklyRevenueItem]] = None
    monthly: Optional[list[MonthlyRevenueItem]] = None


class RevenueTransaction(BaseModel):
    id: Any
    amount: float
    description: Optional[str]
    transaction_date: Optional[datetime]
    category_name: Optional[str]
    vehicle_plate: Optional[str]
    personnel_name: Optional[str]


class RevenueReportData(BaseModel):
    period: PeriodOut
    summary: RevenueSummary
    breakdowns: RevenueReportBreakdowns
    transactions: list[RevenueTransaction]


class RevenueReportOut(BaseModel):
    success: bool = True
    data: RevenueReportData
