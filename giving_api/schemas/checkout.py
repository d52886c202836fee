from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from enum import Enum

from giving_api.models import Currency


class CheckoutMode(str, Enum):
    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"


class CreateSessionRequest(BaseModel):
    """Parameters for a provider-hosted checkout session"""
    mode: CheckoutMode = Field(..., description="One-off payment or monthly subscription")
    amount: int = Field(..., gt=0, description="Amount in minor currency units")
    currency: Optional[Currency] = Field(None, description="Defaults to the campaign currency")
    campaign_id: str = Field(..., min_length=1, description="Campaign to donate to")
    person_id: Optional[str] = Field(None, description="Donor person, if known")
    success_url: str = Field(..., min_length=1)
    cancel_url: str = Field(..., min_length=1)
    billing_email: Optional[EmailStr] = Field(None, description="Prefilled customer email")
    is_anonymous: bool = Field(default=False, description="Do not attribute the donation to a person")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "mode": "payment",
                "amount": 2000,
                "currency": "BGN",
                "campaign_id": "3f9a7c2e-8b1d-4e6f-a5c4-2d1e0f9b8a7c",
                "success_url": "https://example.org/thank-you",
                "cancel_url": "https://example.org/campaigns/help",
                "is_anonymous": False
            }
        }
    )


class CheckoutSessionResponse(BaseModel):
    """Subset of the provider session object; unknown provider fields pass through"""
    id: str
    url: Optional[str] = None
    mode: Optional[str] = None
    payment_intent: Optional[str] = None

    model_config = ConfigDict(extra="allow")
