from typing import Optional

from pydantic import BaseModel, ConfigDict


class GatewayOrder(BaseModel):
    """Order object returned by the gateway's create-order call (amount in minor units)."""
    id: str
    amount: int
    currency: str
    receipt: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
