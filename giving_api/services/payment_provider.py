"""
Stripe client for provider-hosted checkout sessions
"""
import asyncio
from datetime import timedelta
from typing import Any, Dict, Optional

import stripe
import structlog

from giving_api.core.circuit_breaker import CircuitBreaker, CircuitBreakerError
from giving_api.core.config import get_settings
from giving_api.core.errors import PaymentProviderError, ServiceUnavailableError

logger = structlog.get_logger(__name__)


def _stripe_to_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return dict(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def build_payment_circuit_breaker() -> CircuitBreaker:
    """Only transport and server-side Stripe failures count toward opening the circuit"""
    settings = get_settings()
    return CircuitBreaker(
        name="stripe",
        failure_threshold=settings.payment_breaker_failure_threshold,
        recovery_timeout=timedelta(seconds=settings.payment_breaker_recovery_seconds),
        expected_exception=(stripe.APIConnectionError, stripe.APIError),
    )


# Shared across requests so consecutive failures accumulate
payment_circuit_breaker = build_payment_circuit_breaker()


class StripeCheckoutClient:
    """Thin async wrapper over the blocking Stripe SDK"""

    def __init__(self, api_key: Optional[str] = None, breaker: Optional[CircuitBreaker] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.stripe_secret_key
        self.breaker = breaker or payment_circuit_breaker
        stripe.max_network_retries = settings.stripe_max_network_retries

    def _create_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        return _stripe_to_dict(session)

    async def create_checkout_session(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a checkout session.

        Raises:
            ServiceUnavailableError: circuit breaker is open, no call was made
            PaymentProviderError: Stripe rejected or failed the request
        """
        if not self.api_key:
            logger.error("Stripe secret key is not configured")
            raise PaymentProviderError("Payment provider is not configured")

        async def call():
            return await asyncio.to_thread(self._create_session, params)

        try:
            session = await self.breaker.call(call)
        except CircuitBreakerError:
            logger.warning("Payment provider circuit open, rejecting checkout session", breaker=self.breaker.get_state())
            raise ServiceUnavailableError("Payment provider temporarily unavailable")
        except stripe.StripeError as e:
            logger.error(
                "Stripe checkout session creation failed",
                error=str(e),
                http_status=getattr(e, "http_status", None),
                stripe_code=getattr(e, "code", None)
            )
            raise PaymentProviderError("Payment provider rejected the checkout session", detail=getattr(e, "user_message", None))

        logger.info("Stripe checkout session created", session_id=session.get("id"), mode=params.get("mode"))
        return session


def get_payment_client() -> StripeCheckoutClient:
    """Dependency to get the payment provider client"""
    return StripeCheckoutClient()
