from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from giving_api.models import Currency


class CreateVaultRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    campaign_id: str = Field(..., min_length=1)
    currency: Currency = Field(default=Currency.BGN)


class VaultResponse(BaseModel):
    id: str
    name: str
    currency: Currency
    amount: int
    campaign_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VaultListResponse(BaseModel):
    vaults: list[VaultResponse]
    total: int
