"""
Vault repository
"""
from typing import Optional, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from giving_api.models import Vault


class VaultRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, vault: Vault) -> Vault:
        self.db.add(vault)
        await self.db.flush()
        await self.db.refresh(vault)
        return vault

    async def get(self, vault_id: str) -> Optional[Vault]:
        result = await self.db.execute(
            select(Vault).where(Vault.id == vault_id)
        )
        return result.scalar_one_or_none()

    async def list_by_campaign(self, campaign_id: str) -> List[Vault]:
        result = await self.db.execute(
            select(Vault).where(Vault.campaign_id == campaign_id).order_by(Vault.created_at)
        )
        return list(result.scalars().all())

    async def increment(self, vault_id: str, amount: int) -> bool:
        """
        Add amount to the vault balance in a single UPDATE statement,
        so concurrent increments never read-modify-write a stale balance.

        Returns False when the vault does not exist.
        """
        result = await self.db.execute(
            update(Vault)
            .where(Vault.id == vault_id)
            .values(amount=Vault.amount + amount)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1
