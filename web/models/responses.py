"""
Response schemas (Pydantic)
"""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check"""

    status: str = Field(default="ok", description="Service state")
    environment: str = Field(..., description="production / development")
    timestamp: datetime = Field(..., description="Response time (UTC)")


class ReversalResponse(BaseModel):
    """Result of a reversal"""

    reversed: int = Field(..., description="Number of ledger items removed")
