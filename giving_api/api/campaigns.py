from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
import structlog

from giving_api.api.dependencies import get_campaign_service
from giving_api.core.errors import ServiceError
from giving_api.models import CampaignState
from giving_api.schemas.campaign import CampaignListResponse, CampaignResponse, CreateCampaignRequest
from giving_api.schemas.vault import CreateVaultRequest, VaultListResponse, VaultResponse
from giving_api.services.campaign import CampaignService

router = APIRouter(tags=["campaigns"])
logger = structlog.get_logger(__name__)


@router.post("/campaigns", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    campaign_data: CreateCampaignRequest,
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Create a new campaign"""
    try:
        return await campaign_service.create_campaign(campaign_data)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to create campaign", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/campaigns", response_model=CampaignListResponse)
async def list_campaigns(
    skip: int = Query(0, ge=0, description="Number of campaigns to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of campaigns to return"),
    state: Optional[CampaignState] = Query(None, description="Filter by lifecycle state"),
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Get all campaigns with pagination"""
    try:
        campaigns = await campaign_service.list_campaigns(skip=skip, limit=limit, state=state)
        return CampaignListResponse(
            campaigns=[CampaignResponse.model_validate(c) for c in campaigns],
            total=len(campaigns)
        )
    except Exception as e:
        logger.error("Failed to get campaigns", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/campaigns/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: str,
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Get a campaign by ID"""
    try:
        return await campaign_service.get_campaign(campaign_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to get campaign", error=str(e), campaign_id=campaign_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/campaigns/{campaign_id}/vaults", response_model=VaultListResponse)
async def list_campaign_vaults(
    campaign_id: str,
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Get the vaults of a campaign"""
    try:
        vaults = await campaign_service.list_campaign_vaults(campaign_id)
        return VaultListResponse(
            vaults=[VaultResponse.model_validate(v) for v in vaults],
            total=len(vaults)
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to get campaign vaults", error=str(e), campaign_id=campaign_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/vaults", response_model=VaultResponse, status_code=201)
async def create_vault(
    vault_data: CreateVaultRequest,
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Create an empty vault for a campaign"""
    try:
        return await campaign_service.create_vault(vault_data)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to create vault", error=str(e), campaign_id=vault_data.campaign_id)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/vaults/{vault_id}", response_model=VaultResponse)
async def get_vault(
    vault_id: str,
    campaign_service: CampaignService = Depends(get_campaign_service)
):
    """Get a vault and its balance"""
    try:
        return await campaign_service.get_vault(vault_id)
    except ServiceError:
        raise
    except Exception as e:
        logger.error("Failed to get vault", error=str(e), vault_id=vault_id)
        raise HTTPException(status_code=500, detail="Internal server error")
