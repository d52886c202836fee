from typing import Any, Dict, Optional

import structlog

from giving_api.core.config import get_settings
from giving_api.core.errors import NotAcceptableError, NotFoundError
from giving_api.middleware.metrics import checkout_sessions_total
from giving_api.middleware.tracing import get_tracer
from giving_api.models import Campaign
from giving_api.repositories import CampaignRepository
from giving_api.schemas.checkout import CheckoutMode, CreateSessionRequest
from giving_api.services.payment_provider import StripeCheckoutClient

logger = structlog.get_logger(__name__)
tracer = get_tracer(__name__)


def build_checkout_params(campaign: Campaign, session_data: CreateSessionRequest, default_currency: str) -> Dict[str, Any]:
    """Map a session request onto Stripe checkout.Session.create parameters"""
    currency = session_data.currency or campaign.currency
    currency_code = (currency.value if currency else default_currency).lower()

    price_data = {
        "currency": currency_code,
        "unit_amount": session_data.amount,
        "product_data": {"name": campaign.title},
    }
    if session_data.mode == CheckoutMode.SUBSCRIPTION:
        price_data["recurring"] = {"interval": "month"}

    metadata = {"campaignId": campaign.id}
    if session_data.person_id and not session_data.is_anonymous:
        metadata["personId"] = session_data.person_id

    params = {
        "mode": session_data.mode.value,
        "line_items": [
            {
                "price_data": price_data,
                "quantity": 1,
            }
        ],
        "payment_method_types": ["card"],
        "success_url": session_data.success_url,
        "cancel_url": session_data.cancel_url,
        "tax_id_collection": {"enabled": True},
    }

    # Stripe only accepts payment_intent_data in payment mode
    if session_data.mode == CheckoutMode.SUBSCRIPTION:
        params["subscription_data"] = {"metadata": metadata}
    else:
        params["payment_intent_data"] = {"metadata": metadata}

    if session_data.billing_email:
        params["customer_email"] = str(session_data.billing_email)

    return params


class CheckoutService:
    """Gates checkout sessions on campaign state and creates them at the payment provider"""

    def __init__(self, campaigns: CampaignRepository, payment_client: StripeCheckoutClient, default_currency: Optional[str] = None):
        self.campaigns = campaigns
        self.payment_client = payment_client
        self.default_currency = default_currency or get_settings().default_currency

    async def create_checkout_session(self, session_data: CreateSessionRequest) -> Dict[str, Any]:
        campaign = await self.campaigns.get(session_data.campaign_id)
        if not campaign:
            logger.warning("Campaign not found for checkout", campaign_id=session_data.campaign_id)
            raise NotFoundError(f"No Campaign record with ID: {session_data.campaign_id}")

        if not campaign.accepts_donations():
            checkout_sessions_total.labels(result="rejected").inc()
            logger.warning(
                "Campaign not accepting donations",
                campaign_id=campaign.id,
                state=campaign.state.value,
                allow_donation_on_complete=campaign.allow_donation_on_complete
            )
            raise NotAcceptableError(f"Campaign cannot accept donations in state: {campaign.state.value}")

        params = build_checkout_params(campaign, session_data, self.default_currency)

        with tracer.start_as_current_span("payment_provider.create_checkout_session") as span:
            span.set_attribute("campaign.id", campaign.id)
            span.set_attribute("checkout.mode", session_data.mode.value)
            try:
                session = await self.payment_client.create_checkout_session(params)
            except Exception:
                checkout_sessions_total.labels(result="failed").inc()
                raise

        checkout_sessions_total.labels(result="created").inc()
        logger.info(
            "Checkout session created",
            campaign_id=campaign.id,
            session_id=session.get("id"),
            mode=session_data.mode.value,
            amount=session_data.amount
        )
        return session
