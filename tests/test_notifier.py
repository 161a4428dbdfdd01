"""
Tests for the in-process refresh notifier and its Kafka forwarder.
"""

from skillswap.core.events import COURSES_TOPIC, RefreshNotifier, chat_topic
from skillswap.kafka import kafka_manager
from skillswap.kafka.kafka_manager import kafka_forwarder


class FakeProducer:
    def __init__(self):
        self.sent = []
        self.flushed = 0
        self.closed = False

    def send(self, topic, value=None):
        self.sent.append((topic, value))

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True


class TestRefreshNotifier:
    """Test cases for RefreshNotifier."""

    def test_publish_reaches_subscribers_of_topic(self):
        notifier = RefreshNotifier()
        seen = []
        notifier.subscribe(COURSES_TOPIC, lambda topic, payload: seen.append((topic, payload)))
        notifier.subscribe(chat_topic(1), lambda topic, payload: seen.append("wrong"))

        called = notifier.publish(COURSES_TOPIC, {"course_id": 3})

        assert called == 1
        assert seen == [(COURSES_TOPIC, {"course_id": 3})]

    def test_unsubscribe(self):
        """The returned callable detaches the listener; calling it twice is harmless."""
        notifier = RefreshNotifier()
        seen = []
        unsubscribe = notifier.subscribe(COURSES_TOPIC, lambda topic, payload: seen.append(payload))

        unsubscribe()
        unsubscribe()

        assert notifier.publish(COURSES_TOPIC) == 0
        assert notifier.listener_count(COURSES_TOPIC) == 0
        assert seen == []

    def test_wildcard_receives_everything(self):
        notifier = RefreshNotifier()
        topics = []
        notifier.subscribe(RefreshNotifier.WILDCARD, lambda topic, payload: topics.append(topic))

        notifier.publish(COURSES_TOPIC)
        notifier.publish(chat_topic(7))

        assert topics == [COURSES_TOPIC, "chat.7"]

    def test_failing_listener_does_not_stop_others(self, caplog):
        notifier = RefreshNotifier()
        seen = []

        def broken(topic, payload):
            raise RuntimeError("boom")

        notifier.subscribe(COURSES_TOPIC, broken)
        notifier.subscribe(COURSES_TOPIC, lambda topic, payload: seen.append(payload))

        assert notifier.publish(COURSES_TOPIC, 1) == 2
        assert seen == [1]
        assert "Listener failed" in caplog.text


class TestKafkaForwarder:
    def test_forwards_topic_and_payload(self):
        producer = FakeProducer()
        notifier = RefreshNotifier()
        notifier.subscribe(RefreshNotifier.WILDCARD, kafka_forwarder(producer))

        notifier.publish(chat_topic(5), {"message_id": 9})

        assert producer.sent == [("chat.5", {"topic": "chat.5", "payload": {"message_id": 9}})]
        assert producer.flushed == 0

    def test_buffered_events_are_flushed_on_close(self, monkeypatch):
        """Forwarding never flushes per event; closing the shared producer does."""
        producer = FakeProducer()
        monkeypatch.setattr(kafka_manager, "_producer", producer)
        kafka_forwarder()(COURSES_TOPIC, {"course_id": 1})
        assert producer.flushed == 0

        kafka_manager.close_producer()

        assert producer.flushed == 1
        assert producer.closed
        assert kafka_manager._producer is None
