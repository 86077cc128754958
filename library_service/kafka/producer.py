"""Kafka producer. Publishes inventory.updated after each committed borrow/return."""
import json
import logging
from datetime import datetime, timezone

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from library_service.config import settings

logger = logging.getLogger(__name__)


def inventory_event(action: str, record, previous_available: int, new_available: int) -> dict:
    return {
        "bookId": record.book_id,
        "userId": record.user_id,
        "borrowRecordId": record.id,
        "action": action,
        "previousAvailable": previous_available,
        "newAvailable": new_available,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class InventoryEventPublisher:
    """Sends inventory events; a publisher without a producer drops them."""

    def __init__(self, producer: AIOKafkaProducer | None, topic: str) -> None:
        self._producer = producer
        self.topic = topic

    @property
    def enabled(self) -> bool:
        return self._producer is not None

    async def publish(self, event: dict) -> None:
        if self._producer is None:
            return
        # The borrow/return is already committed; a lost event is logged, not raised.
        try:
            await self._producer.send_and_wait(self.topic, value=event)
        except KafkaError as exc:
            logger.error("Failed to publish %s for bookId=%s: %s", self.topic, event.get("bookId"), exc, exc_info=True)
            return
        logger.info("Published %s: bookId=%s action=%s", self.topic, event["bookId"], event["action"])

    async def stop(self) -> None:
        if self._producer is not None:
            await self._producer.stop()


async def start_publisher() -> InventoryEventPublisher:
    if not settings.kafka_bootstrap_servers:
        logger.info("Kafka not configured; inventory events disabled.")
        return InventoryEventPublisher(None, settings.kafka_inventory_topic)

    producer = AIOKafkaProducer(
        bootstrap_servers=settings.kafka_bootstrap_servers,
        value_serializer=lambda v: json.dumps(v).encode("utf-8"),
    )
    await producer.start()
    logger.info("Inventory Kafka producer started.")
    return InventoryEventPublisher(producer, settings.kafka_inventory_topic)
