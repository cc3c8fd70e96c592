"""Router aggregation.

Report endpoints (profit, revenue) and the record-keeping endpoints they read
from are all mounted under ``/api``.
"""

from fastapi import FastAPI

from . import categories, personnel, profit, revenue, transactions, vehicles


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    app.include_router(profit.router, prefix="/api")
    app.include_router(revenue.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
    app.include_router(vehicles.router, prefix="/api")
    app.include_router(personnel.router, prefix="/api")
    app.include_router(transactions.router, prefix="/api")
