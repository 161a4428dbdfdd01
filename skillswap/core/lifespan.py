import logging
from contextlib import asynccontextmanager

from skillswap import config
from skillswap.db.database import engine, init_models
from .events import RefreshNotifier

logger = logging.getLogger("lifespan")


@asynccontextmanager
async def lifespan(app):
    await init_models()
    notifier = RefreshNotifier()
    app.state.notifier = notifier
    unsubscribe = None
    if config.KAFKA_ENABLED:
        from skillswap.kafka.kafka_manager import kafka_forwarder
        unsubscribe = notifier.subscribe(RefreshNotifier.WILDCARD, kafka_forwarder())
        logger.info(f"Forwarding events to Kafka at {config.KAFKA_BROKER_URL}")
    yield
    if unsubscribe:
        unsubscribe()
        from skillswap.kafka.kafka_manager import close_producer
        close_producer()
    await engine.dispose()
