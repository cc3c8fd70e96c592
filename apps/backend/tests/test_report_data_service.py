from datetime import datetime
from decimal import Decimal

from fleetledger import models
from fleetledger.reporting.periods import resolve_monthly, resolve_yearly
from fleetledger.services import ReportDataService


def test_fetch_records_joins_names_and_skips_cancelled(db_session, refs, add_txn):
    add_txn(datetime(2024, 7, 5, 9), 100, 25, category=refs["wash"], vehicle=refs["vehicle"], person=refs["person"])
    add_txn(datetime(2024, 7, 4, 9), 50, None)
    add_txn(datetime(2024, 7, 6, 9), 70, 0, status=models.TransactionStatus.CANCELLED)
    add_txn(datetime(2024, 7, 7, 9), 30, 0, status=models.TransactionStatus.PENDING)

    records = ReportDataService(db_session).fetch_records(resolve_monthly(2024, 7))
    assert [r.amount for r in records] == [Decimal("50"), Decimal("100"), Decimal("30")]
    assert all(r.status != "cancelled" for r in records)

    joined = records[1]
    assert joined.category_name == "Yıkama"
    assert joined.vehicle_plate == "34ABC123"
    assert joined.personnel_name == "Ali Veli"
    assert joined.month is None
    assert records[0].category_name is None


def test_fetch_records_category_filter(db_session, refs, add_txn):
    add_txn(datetime(2024, 7, 5, 9), 100, category=refs["wash"])
    add_txn(datetime(2024, 7, 5, 10), 200, category=refs["repair"])

    service = ReportDataService(db_session)
    records = service.fetch_records(resolve_monthly(2024, 7), [refs["repair"].id])
    assert [r.category_name for r in records] == ["Bakım"]


def test_yearly_fetch_attaches_business_month(db_session, refs, add_txn):
    add_txn(datetime(2024, 4, 30, 22, 0), 10)

    records = ReportDataService(db_session).fetch_records(resolve_yearly(2024))
    assert records[0].month == 5
