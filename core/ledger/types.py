"""
Ledger type definitions

Enums and fixed names used across posting and reporting.
"""

from enum import Enum


class LedgerType(str, Enum):
    """Ledger classification

    Inherits from str so values serialise as plain JSON strings.
    """

    INCOME = "income"
    EXPENSE = "expense"


class SourceTag(str, Enum):
    """Business system a ledger item was posted from"""

    SALARY = "salary"
    PETTY_CASH = "petty_cash"
    VARISANGYA = "varisangya"  # monthly membership dues
    ZAKAT = "zakat"
    MANUAL = "manual"


class AccountStatus(str, Enum):
    """Institute bank account status"""

    ACTIVE = "active"
    INACTIVE = "inactive"


class SalaryStatus(str, Enum):
    """Salary payment status (only PAID posts to the ledger)"""

    PAID = "paid"
    PENDING = "pending"
    CANCELLED = "cancelled"


# Ledgers auto-created by the posting call sites
SALARY_LEDGER = "Salary Payments"
PETTY_CASH_FLOAT_LEDGER = "Petty Cash"
PETTY_CASH_EXPENSE_LEDGER = "Petty Cash Expenses"

# Report bucket labels
UNCATEGORIZED = "Uncategorized"
UNASSIGNED = "Unassigned"

# Payment method used for petty cash postings
CASH_PAYMENT = "cash"
