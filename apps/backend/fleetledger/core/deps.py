from __future__ import annotations

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from fleetledger.core.database import get_db
from fleetledger.reporting.periods import parse_category_ids
from fleetledger.services import ReportDataService


def get_report_service(db: Session = Depends(get_db)) -> ReportDataService:
    return ReportDataService(db)


def get_category_ids(
    categories: str | None = Query(None),
    category_ids: str | None = Query(None, alias="categoryIds"),
) -> list[int]:
    """Optional category filter.

    Both ``categories`` and ``categoryIds`` are accepted as comma separated
    id lists; the two are merged. Entries that are not integers are dropped.
    """
    ids = parse_category_ids(categories) + parse_category_ids(category_ids)
    return list(dict.fromkeys(ids))
