"""
Database module for Rescue365
SQL persistence for rescue reports when the hosted table is not used
"""

from .connection import DatabaseConnection, init_db
from .models import Base, RescueReportRecord

__all__ = [
    "DatabaseConnection",
    "init_db",
    "Base",
    "RescueReportRecord",
]
