"""
Services package

Database-facing helpers used by the routers.
"""

from .report_data_service import ReportDataService

__all__ = [
    "ReportDataService",
]
