import json
from datetime import datetime, timezone
from typing import Optional
import structlog
from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from giving_api.core.config import get_settings
from giving_api.models import Donation

logger = structlog.get_logger(__name__)


class KafkaProducer:
    """Kafka producer for donation lifecycle events"""

    def __init__(self):
        self.producer: Optional[AIOKafkaProducer] = None
        self.settings = get_settings()

    async def start(self):
        """Initialize and start Kafka producer"""
        try:
            self.producer = AIOKafkaProducer(
                bootstrap_servers=self.settings.kafka_bootstrap_servers,
                value_serializer=lambda v: json.dumps(v).encode('utf-8'),
                compression_type='gzip',
                acks='all',  # Wait for all in-sync replicas
                retry_backoff_ms=500,
                request_timeout_ms=30000,
            )
            await self.producer.start()
            logger.info("Kafka producer started", bootstrap_servers=self.settings.kafka_bootstrap_servers)
        except KafkaError as e:
            self.producer = None
            logger.error("Failed to start Kafka producer", error=str(e))
            raise

    async def stop(self):
        """Stop Kafka producer gracefully"""
        if self.producer:
            try:
                await self.producer.stop()
                logger.info("Kafka producer stopped")
            except Exception as e:
                logger.error("Error stopping Kafka producer", error=str(e))
            finally:
                self.producer = None

    def is_connected(self) -> bool:
        return self.producer is not None

    async def publish_donation_succeeded(self, donation: Donation, campaign_id: Optional[str] = None):
        """
        Publish donation_succeeded event after the vault has been credited.

        Best effort: the database is the source of truth, so publishing
        problems are logged and never raised to the caller.
        """
        if not self.producer:
            logger.warning("Kafka producer not running, skipping donation_succeeded event", donation_id=donation.id)
            return

        event = {
            "event_type": "donation_succeeded",
            "donation_id": donation.id,
            "campaign_id": campaign_id,
            "vault_id": donation.target_vault_id,
            "person_id": donation.person_id,
            "amount": donation.amount,
            "currency": donation.currency.value,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        try:
            await self.producer.send_and_wait(
                self.settings.kafka_topic_donation_succeeded,
                value=event,
                key=donation.id.encode('utf-8')
            )
            logger.info(
                "Published donation_succeeded event",
                donation_id=donation.id,
                topic=self.settings.kafka_topic_donation_succeeded
            )
        except KafkaError as e:
            logger.error("Failed to publish donation_succeeded event", donation_id=donation.id, error=str(e))
        except Exception as e:
            logger.error("Unexpected error publishing to Kafka", donation_id=donation.id, error=str(e))


# Global producer instance
kafka_producer = KafkaProducer()


async def get_kafka_producer() -> KafkaProducer:
    """Get Kafka producer instance"""
    return kafka_producer
