import uuid

from conftest import utc
from railclaim.core.events import BookingCompleted, ClaimSubmitted, EventBus


def _completed(delay=75):
    return BookingCompleted(
        booking_id=uuid.uuid4(),
        train_id=uuid.uuid4(),
        delay_minutes=delay,
        is_eligible_for_claim=delay >= 60,
        completed_at=utc(2026, 1, 15, 14, 0),
    )


def test_publish_reaches_only_subscribers_of_that_type():
    bus = EventBus()
    completed, submitted = [], []
    bus.subscribe(BookingCompleted, completed.append)
    bus.subscribe(ClaimSubmitted, submitted.append)

    event = _completed()
    bus.publish(event)

    assert completed == [event]
    assert submitted == []


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []
    bus.subscribe(BookingCompleted, received.append)
    bus.publish(_completed())

    bus.unsubscribe(BookingCompleted, received.append)
    bus.publish(_completed())

    assert len(received) == 1
    # unknown handler is a no-op
    bus.unsubscribe(ClaimSubmitted, received.append)


def test_failing_subscriber_does_not_block_others(caplog):
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("push service down")

    bus.subscribe(BookingCompleted, broken)
    bus.subscribe(BookingCompleted, received.append)

    bus.publish(_completed())

    assert len(received) == 1
    assert "push service down" in caplog.text
