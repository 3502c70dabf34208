"""
Web models package

Pydantic schemas
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountStatusRequest,
    PostingRequestModel,
    ReversalRequestModel,
)
from web.models.responses import (
    HealthResponse,
    ReversalResponse,
)

__all__ = [
    # Requests
    "PostingRequestModel",
    "ReversalRequestModel",
    "AccountCreateRequest",
    "AccountStatusRequest",
    # Responses
    "HealthResponse",
    "ReversalResponse",
]
