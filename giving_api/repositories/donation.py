"""
Donation repository
"""
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giving_api.models import Donation, DonationStatus, Vault


class DonationRepository:
    """Typed queries over the donations table. Never commits; the caller owns the transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============================================================================
    # READ
    # ============================================================================

    async def get(self, donation_id: str) -> Optional[Donation]:
        result = await self.db.execute(
            select(Donation).where(Donation.id == donation_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, donation_id: str) -> Optional[Donation]:
        """Fetch and row-lock the donation until the surrounding transaction ends"""
        result = await self.db.execute(
            select(Donation)
            .where(Donation.id == donation_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[DonationStatus] = None,
        campaign_id: Optional[str] = None,
        person_id: Optional[str] = None
    ) -> List[Donation]:
        query = select(Donation)

        if status:
            query = query.where(Donation.status == status)

        if campaign_id:
            query = query.join(Vault, Vault.id == Donation.target_vault_id).where(Vault.campaign_id == campaign_id)

        if person_id:
            query = query.where(Donation.person_id == person_id)

        query = query.order_by(Donation.created_at.desc()).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ============================================================================
    # UPDATE
    # ============================================================================

    async def update(self, donation: Donation, **fields) -> Donation:
        for name, value in fields.items():
            setattr(donation, name, value)
        await self.db.flush()
        return donation
