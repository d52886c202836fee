from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
import structlog

from giving_api.api.dependencies import get_checkout_service, get_donation_service, require_admin
from giving_api.core.errors import ServiceError
from giving_api.models import DonationStatus
from giving_api.schemas.checkout import CheckoutSessionResponse, CreateSessionRequest
from giving_api.schemas.donation import (
    DonationListResponse,
    DonationResponse,
    PublicDonationListResponse,
    PublicDonationResponse,
    UpdateDonationRequest,
)
from giving_api.services.checkout import CheckoutService
from giving_api.services.donation import DonationService

router = APIRouter(prefix="/donations", tags=["donations"])
logger = structlog.get_logger(__name__)


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    session_data: CreateSessionRequest,
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    """
    Create a provider-hosted checkout session for a campaign.
    Rejected with 406 when the campaign is complete and not accepting more donations.
    """
    try:
        logger.info(
            "Creating checkout session",
            campaign_id=session_data.campaign_id,
            mode=session_data.mode.value,
            amount=session_data.amount
        )
        return await checkout_service.create_checkout_session(session_data)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to create checkout session", error=str(e), campaign_id=session_data.campaign_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=DonationListResponse)
async def list_donations(
    skip: int = Query(0, ge=0, description="Number of donations to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of donations to return"),
    status: Optional[DonationStatus] = Query(None, description="Filter by status"),
    campaign_id: Optional[str] = Query(None, description="Filter by campaign"),
    donation_service: DonationService = Depends(get_donation_service)
):
    """Get donations with pagination"""
    try:
        donations = await donation_service.list_donations(skip=skip, limit=limit, status=status, campaign_id=campaign_id)
        return DonationListResponse(
            donations=[DonationResponse.model_validate(d) for d in donations],
            total=len(donations)
        )
    except Exception as e:
        logger.error("Failed to list donations", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/list-public", response_model=PublicDonationListResponse)
async def list_public_donations(
    campaign_id: Optional[str] = Query(None, description="Filter by campaign"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    donation_service: DonationService = Depends(get_donation_service)
):
    """Succeeded donations, without billing or payment-provider details"""
    try:
        donations = await donation_service.list_public_donations(campaign_id=campaign_id, skip=skip, limit=limit)
        return PublicDonationListResponse(
            donations=[PublicDonationResponse.model_validate(d) for d in donations],
            total=len(donations)
        )
    except Exception as e:
        logger.error("Failed to list public donations", error=str(e), campaign_id=campaign_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/person/{person_id}", response_model=DonationListResponse)
async def list_person_donations(
    person_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    donation_service: DonationService = Depends(get_donation_service)
):
    """Get donations attributed to a person"""
    try:
        donations = await donation_service.list_person_donations(person_id, skip=skip, limit=limit)
        return DonationListResponse(
            donations=[DonationResponse.model_validate(d) for d in donations],
            total=len(donations)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to list person donations", error=str(e), person_id=person_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/{donation_id}", response_model=DonationResponse)
async def get_donation(
    donation_id: str,
    donation_service: DonationService = Depends(get_donation_service)
):
    """Get a donation by ID"""
    try:
        return await donation_service.get_donation(donation_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to get donation", error=str(e), donation_id=donation_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/{donation_id}", response_model=DonationResponse)
async def update_donation(
    donation_id: str,
    update_data: UpdateDonationRequest,
    admin_id: str = Depends(require_admin),
    donation_service: DonationService = Depends(get_donation_service)
):
    """
    Update donation status, donor, type or amount.
    The target vault is credited once, when the donation first becomes succeeded.
    """
    try:
        logger.info(
            "Updating donation",
            donation_id=donation_id,
            admin_id=admin_id,
            status=update_data.status.value if update_data.status else None,
            target_person_id=update_data.target_person_id
        )
        return await donation_service.update_donation(donation_id, update_data)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to update donation", error=str(e), donation_id=donation_id)
        raise HTTPException(status_code=500, detail="Internal server error")
