"""
Web services package

Business logic behind the routes
"""

from web.services.accounting_service import AccountingService

__all__ = [
    "AccountingService",
]
