"""Trade data model."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class Trade(BaseModel):
    """Represents a single executed trade."""

    timestamp: datetime = Field(..., description="Trade execution timestamp")
    amount: Decimal = Field(..., ge=0, description="Traded quantity")
    price: Decimal = Field(..., ge=0, description="Execution price")

    model_config = {"frozen": True}
