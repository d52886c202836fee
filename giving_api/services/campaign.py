from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from giving_api.core.errors import ConflictError, NotFoundError
from giving_api.models import Campaign, CampaignState, Vault
from giving_api.repositories import CampaignRepository, VaultRepository
from giving_api.schemas.campaign import CreateCampaignRequest
from giving_api.schemas.vault import CreateVaultRequest

logger = structlog.get_logger(__name__)


class CampaignService:
    """Campaign and vault reads/creation. Campaign state changes happen elsewhere."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.campaigns = CampaignRepository(db)
        self.vaults = VaultRepository(db)

    async def create_campaign(self, campaign_data: CreateCampaignRequest) -> Campaign:
        if await self.campaigns.get_by_slug(campaign_data.slug):
            raise ConflictError(f"Campaign with slug '{campaign_data.slug}' already exists")

        try:
            campaign = await self.campaigns.create(Campaign(**campaign_data.model_dump()))
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same slug
            await self.db.rollback()
            raise ConflictError(f"Campaign with slug '{campaign_data.slug}' already exists")
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create campaign", error=str(e), slug=campaign_data.slug)
            raise

        logger.info("Campaign created successfully", campaign_id=campaign.id, slug=campaign.slug)
        return campaign

    async def get_campaign(self, campaign_id: str) -> Campaign:
        campaign = await self.campaigns.get(campaign_id)
        if not campaign:
            logger.warning("Campaign not found", campaign_id=campaign_id)
            raise NotFoundError(f"No Campaign record with ID: {campaign_id}")
        return campaign

    async def list_campaigns(self, skip: int = 0, limit: int = 100, state: Optional[CampaignState] = None) -> List[Campaign]:
        return await self.campaigns.list(skip=skip, limit=limit, state=state)

    async def create_vault(self, vault_data: CreateVaultRequest) -> Vault:
        await self.get_campaign(vault_data.campaign_id)

        try:
            vault = await self.vaults.create(Vault(**vault_data.model_dump(), amount=0))
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to create vault", error=str(e), campaign_id=vault_data.campaign_id)
            raise

        logger.info("Vault created successfully", vault_id=vault.id, campaign_id=vault.campaign_id)
        return vault

    async def get_vault(self, vault_id: str) -> Vault:
        vault = await self.vaults.get(vault_id)
        if not vault:
            raise NotFoundError(f"No Vault record with ID: {vault_id}")
        return vault

    async def list_campaign_vaults(self, campaign_id: str) -> List[Vault]:
        await self.get_campaign(campaign_id)
        return await self.vaults.list_by_campaign(campaign_id)
