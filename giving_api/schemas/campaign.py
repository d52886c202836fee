from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

from giving_api.models import CampaignState, Currency


class CreateCampaignRequest(BaseModel):
    """Request schema for creating a campaign"""
    title: str = Field(..., min_length=1, max_length=200, description="Campaign title is required")
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9-]+$", description="URL-safe unique name")
    description: Optional[str] = Field(None, description="Campaign description")
    state: CampaignState = Field(default=CampaignState.INITIAL)
    allow_donation_on_complete: bool = Field(default=False, description="Keep accepting donations once complete")
    target_amount: int = Field(default=0, ge=0, description="Goal in minor currency units")
    currency: Currency = Field(default=Currency.BGN)
    start_date: Optional[datetime] = Field(None, description="Campaign start date")
    end_date: Optional[datetime] = Field(None, description="Campaign end date")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Heating for the village school",
                "slug": "heating-village-school",
                "description": "New boiler before winter",
                "state": "active",
                "allow_donation_on_complete": False,
                "target_amount": 1500000,
                "currency": "BGN"
            }
        }
    )


class CampaignResponse(BaseModel):
    """Response schema for campaign data"""
    id: str
    title: str
    slug: str
    description: Optional[str]
    state: CampaignState
    allow_donation_on_complete: bool
    target_amount: int
    currency: Currency
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CampaignListResponse(BaseModel):
    """Response schema for list of campaigns"""
    campaigns: list[CampaignResponse]
    total: int
