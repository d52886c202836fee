"""
Campaign repository
"""
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giving_api.models import Campaign, CampaignState


class CampaignRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, campaign: Campaign) -> Campaign:
        self.db.add(campaign)
        await self.db.flush()
        await self.db.refresh(campaign)
        return campaign

    async def get(self, campaign_id: str) -> Optional[Campaign]:
        result = await self.db.execute(
            select(Campaign).where(Campaign.id == campaign_id)
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Campaign]:
        result = await self.db.execute(
            select(Campaign).where(Campaign.slug == slug)
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        state: Optional[CampaignState] = None
    ) -> List[Campaign]:
        query = select(Campaign)
        if state:
            query = query.where(Campaign.state == state)
        query = query.order_by(Campaign.created_at.desc()).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())
