"""
Explicit construction of services for each request
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from giving_api.core.errors import ForbiddenError, UnauthorizedError
from giving_api.database.database import get_db
from giving_api.kafka.producer import KafkaProducer, get_kafka_producer
from giving_api.repositories import CampaignRepository
from giving_api.services.campaign import CampaignService
from giving_api.services.checkout import CheckoutService
from giving_api.services.donation import DonationService
from giving_api.services.payment_provider import StripeCheckoutClient, get_payment_client
from giving_api.services.person import PersonService


# ============================================================================
# HELPER: Extract user from gateway headers
# ============================================================================

def require_user(x_user_id: Optional[str] = Header(None)) -> str:
    """Require a user authenticated by the gateway"""
    if not x_user_id:
        raise UnauthorizedError("Authentication required")
    return x_user_id


def require_admin(
    user_id: str = Depends(require_user),
    x_user_role: Optional[str] = Header(None)
) -> str:
    """Require admin role"""
    if x_user_role != "admin":
        raise ForbiddenError("Admin access required")
    return user_id


# ============================================================================
# SERVICES
# ============================================================================

def get_donation_service(
    db: AsyncSession = Depends(get_db),
    events: KafkaProducer = Depends(get_kafka_producer)
) -> DonationService:
    return DonationService(db, events=events)


def get_checkout_service(
    db: AsyncSession = Depends(get_db),
    payment_client: StripeCheckoutClient = Depends(get_payment_client)
) -> CheckoutService:
    return CheckoutService(CampaignRepository(db), payment_client)


def get_campaign_service(db: AsyncSession = Depends(get_db)) -> CampaignService:
    return CampaignService(db)


def get_person_service(db: AsyncSession = Depends(get_db)) -> PersonService:
    return PersonService(db)
