from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from giving_api.core.errors import NotAcceptableError, NotFoundError, ServiceError, InternalError
from giving_api.kafka.producer import KafkaProducer
from giving_api.middleware.metrics import donation_status_transitions_total, vault_increments_total
from giving_api.models import Donation, DonationStatus, can_transition
from giving_api.repositories import DonationRepository, PersonRepository, VaultRepository
from giving_api.schemas.donation import UpdateDonationRequest

logger = structlog.get_logger(__name__)


class DonationService:
    """Business logic for donation operations"""

    def __init__(
        self,
        db: AsyncSession,
        donations: Optional[DonationRepository] = None,
        persons: Optional[PersonRepository] = None,
        vaults: Optional[VaultRepository] = None,
        events: Optional[KafkaProducer] = None
    ):
        self.db = db
        self.donations = donations or DonationRepository(db)
        self.persons = persons or PersonRepository(db)
        self.vaults = vaults or VaultRepository(db)
        self.events = events

    async def get_donation(self, donation_id: str) -> Donation:
        donation = await self.donations.get(donation_id)
        if not donation:
            logger.warning("Donation not found", donation_id=donation_id)
            raise NotFoundError(f"No Donation record with ID: {donation_id}")
        return donation

    async def list_donations(
        self,
        skip: int = 0,
        limit: int = 100,
        status: Optional[DonationStatus] = None,
        campaign_id: Optional[str] = None
    ) -> List[Donation]:
        donations = await self.donations.list(skip=skip, limit=limit, status=status, campaign_id=campaign_id)
        logger.info("Donations retrieved", count=len(donations), status=status.value if status else None, campaign_id=campaign_id)
        return donations

    async def list_public_donations(self, campaign_id: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Donation]:
        """Succeeded donations only; anything else is not money the campaign has received"""
        return await self.donations.list(
            skip=skip,
            limit=limit,
            status=DonationStatus.SUCCEEDED,
            campaign_id=campaign_id
        )

    async def list_person_donations(self, person_id: str, skip: int = 0, limit: int = 100) -> List[Donation]:
        if not await self.persons.get(person_id):
            raise NotFoundError(f"No Person record with ID: {person_id}")
        return await self.donations.list(skip=skip, limit=limit, person_id=person_id)

    async def update_donation(self, donation_id: str, update_data: UpdateDonationRequest) -> Donation:
        """
        Apply a partial update and credit the target vault when the donation
        first reaches SUCCEEDED.

        The donation row is locked, and the donation write and the vault
        increment commit together, so a redundant or concurrent update to
        SUCCEEDED can never credit the vault twice.

        Raises:
            NotFoundError: donation, or the new target person, does not exist
            NotAcceptableError: the status change or amount change is not allowed
        """
        try:
            donation = await self.donations.get_for_update(donation_id)
            if not donation:
                logger.warning("Donation not found for update", donation_id=donation_id)
                raise NotFoundError(f"No Donation record with ID: {donation_id}")

            previous_status = donation.status
            person_id = donation.person_id

            if update_data.target_person_id and update_data.target_person_id != donation.person_id:
                person = await self.persons.get(update_data.target_person_id)
                if not person:
                    logger.warning("Target person not found", donation_id=donation_id, person_id=update_data.target_person_id)
                    raise NotFoundError(f"No Person record with ID: {update_data.target_person_id}")
                person_id = person.id

            new_status = update_data.status or previous_status
            if not can_transition(previous_status, new_status):
                raise NotAcceptableError(
                    f"Cannot transition donation from '{previous_status.value}' to '{new_status.value}'"
                )

            fields = {"status": new_status, "person_id": person_id}
            if update_data.type is not None:
                fields["type"] = update_data.type
            if update_data.amount is not None and update_data.amount != donation.amount:
                if previous_status == DonationStatus.SUCCEEDED:
                    raise NotAcceptableError("Cannot change the amount of a succeeded donation")
                fields["amount"] = update_data.amount

            donation = await self.donations.update(donation, **fields)

            credited = previous_status != DonationStatus.SUCCEEDED and new_status == DonationStatus.SUCCEEDED
            if credited:
                if not await self.vaults.increment(donation.target_vault_id, donation.amount):
                    raise InternalError(f"Vault {donation.target_vault_id} of donation {donation_id} does not exist")

            await self.db.commit()

        except ServiceError:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to update donation", error=str(e), donation_id=donation_id)
            raise

        await self.db.refresh(donation)

        if new_status != previous_status:
            donation_status_transitions_total.labels(
                from_status=previous_status.value,
                to_status=new_status.value
            ).inc()

        logger.info(
            "Donation updated successfully",
            donation_id=donation_id,
            previous_status=previous_status.value,
            status=new_status.value,
            person_id=person_id,
            vault_credited=credited
        )

        if credited:
            vault_increments_total.inc()
            await self._publish_succeeded(donation)

        return donation

    async def _publish_succeeded(self, donation: Donation):
        """Runs after commit, so a failure here is logged and never reaches the caller"""
        if not self.events:
            return
        try:
            vault = await self.vaults.get(donation.target_vault_id)
            await self.events.publish_donation_succeeded(
                donation,
                campaign_id=vault.campaign_id if vault else None
            )
        except Exception as e:
            logger.error("Failed to publish donation_succeeded event", donation_id=donation.id, error=str(e))
