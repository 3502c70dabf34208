"""
Request schemas (Pydantic)

Validation of API request bodies. Field names follow the camelCase JSON
the admin frontend sends.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from core.ledger.types import AccountStatus, LedgerType, SourceTag


class PostingRequestModel(BaseModel):
    """Manual or event posting"""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "instituteId": "inst-1",
                    "ledgerName": "Donations",
                    "ledgerType": "income",
                    "amount": "500.00",
                    "description": "Friday collection",
                    "date": "2024-01-05",
                    "source": "manual",
                }
            ]
        },
    )

    institute_id: str | None = Field(default=None, alias="instituteId", description="Institute")
    ledger_name: str = Field(..., alias="ledgerName", min_length=1, description="Ledger name")
    ledger_type: LedgerType = Field(..., alias="ledgerType", description="income / expense")
    amount: Decimal = Field(..., ge=0, description="Non-negative amount")
    description: str = Field(..., description="Narration")
    entry_date: date = Field(..., alias="date", description="Calendar date")
    source: SourceTag = Field(default=SourceTag.MANUAL, description="Source tag")
    source_id: str | None = Field(default=None, alias="sourceId", description="Source record id")
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    reference_no: str | None = Field(default=None, alias="referenceNo")
    category_name: str | None = Field(default=None, alias="categoryName")


class ReversalRequestModel(BaseModel):
    """Reverse every item of a source record"""

    model_config = ConfigDict(populate_by_name=True)

    source: SourceTag = Field(..., description="Source tag")
    source_id: str = Field(..., alias="sourceId", min_length=1, description="Source record id")


class AccountCreateRequest(BaseModel):
    """Create an institute bank account"""

    model_config = ConfigDict(populate_by_name=True)

    institute_id: str = Field(..., alias="instituteId", min_length=1)
    account_name: str = Field(..., alias="accountName", min_length=1)
    bank_name: str | None = Field(default=None, alias="bankName")
    account_number: str | None = Field(default=None, alias="accountNumber")
    ifsc_code: str | None = Field(default=None, alias="ifscCode")
    opening_balance: Decimal = Field(default=Decimal("0"), alias="openingBalance")
    status: AccountStatus = Field(default=AccountStatus.ACTIVE)


class AccountStatusRequest(BaseModel):
    """Activate / deactivate an account"""

    status: AccountStatus = Field(..., description="active / inactive")
