from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

from giving_api.models import Currency, DonationStatus, DonationType, PaymentProvider


class UpdateDonationRequest(BaseModel):
    """Partial donation update. Omitted fields keep their stored values."""
    status: Optional[DonationStatus] = Field(None, description="New donation status")
    target_person_id: Optional[str] = Field(None, min_length=1, description="Person the donation is attributed to")
    type: Optional[DonationType] = Field(None, description="Donation type")
    amount: Optional[int] = Field(None, gt=0, description="Amount in minor currency units")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "succeeded",
                "target_person_id": "5f0b1c8e-2a7d-4a53-9a8e-0b7c2f3d4e5f"
            }
        }
    )


class DonationResponse(BaseModel):
    """Response schema for donation data"""
    id: str
    type: DonationType
    status: DonationStatus
    provider: PaymentProvider
    currency: Currency
    amount: int
    target_vault_id: str
    person_id: Optional[str]
    ext_customer_id: Optional[str]
    ext_payment_intent_id: Optional[str]
    ext_payment_method_id: Optional[str]
    billing_email: Optional[str]
    billing_name: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "0c5e8e7a-6a55-4a8f-8d0f-2f1b7f3c9d11",
                "type": "donation",
                "status": "succeeded",
                "provider": "stripe",
                "currency": "BGN",
                "amount": 2000,
                "target_vault_id": "9b2d7c1e-1f3a-4e5b-8c6d-7e8f9a0b1c2d",
                "person_id": None,
                "ext_customer_id": "cus_123",
                "ext_payment_intent_id": "pi_123",
                "ext_payment_method_id": "pm_123",
                "billing_email": "donor@example.com",
                "billing_name": "Jane Donor",
                "created_at": "2025-11-21T14:30:00Z",
                "updated_at": "2025-11-21T14:30:00Z"
            }
        }
    )


class DonationListResponse(BaseModel):
    donations: list[DonationResponse]
    total: int


class PublicDonationResponse(BaseModel):
    """Donation as shown on a campaign page. person_id is hidden for anonymous donors."""
    id: str
    type: DonationType
    currency: Currency
    amount: int
    target_vault_id: str
    person_id: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicDonationListResponse(BaseModel):
    donations: list[PublicDonationResponse]
    total: int
