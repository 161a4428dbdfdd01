from kafka import KafkaProducer
import json
import logging

from skillswap import config

logger = logging.getLogger("kafka")

_producer = None


def get_producer():
    """Create the producer on first use so importing never needs a broker."""
    global _producer
    if _producer is None:
        _producer = KafkaProducer(
            bootstrap_servers=config.KAFKA_BROKER_URL,
            value_serializer=lambda v: json.dumps(v, default=str).encode('utf-8')
        )
    return _producer


def send_event(topic: str, event: dict, producer=None, flush: bool = True):
    """Отправка события в Kafka."""
    producer = producer or get_producer()
    producer.send(topic, value=event)
    if flush:
        producer.flush()


def close_producer():
    """Flush whatever is still buffered and drop the producer."""
    global _producer
    if _producer is not None:
        _producer.flush()
        _producer.close()
        _producer = None


def kafka_forwarder(producer=None):
    """Build a notifier callback that mirrors every event into Kafka."""
    def forward(topic, payload):
        # send() only buffers; the producer batches in its own thread
        send_event(topic, {"topic": topic, "payload": payload}, producer=producer, flush=False)
        logger.info(f"Forwarded '{topic}' to Kafka")
    return forward
