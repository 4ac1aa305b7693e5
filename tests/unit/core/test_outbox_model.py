from __future__ import annotations

import pytest

from modules.core.models import EventStatus, OutboxEvent

pytestmark = pytest.mark.unit


@pytest.fixture()
def outbox_event():
    return OutboxEvent.objects.create(
        event_type="OrderPlaced",
        aggregate_id="0190a2b4-0000-7000-8000-000000000000",
        payload={"quantity": 1},
        topic="orders",
    )


def test_defaults_to_pending(outbox_event):
    assert outbox_event.status == EventStatus.PENDING
    assert outbox_event.retry_count == 0
    assert outbox_event.processed_at is None


def test_mark_as_published(outbox_event):
    outbox_event.mark_as_published()
    outbox_event.refresh_from_db()
    assert outbox_event.status == EventStatus.PUBLISHED
    assert outbox_event.processed_at is not None


def test_mark_as_failed_counts_retries(outbox_event):
    outbox_event.mark_as_failed("handler crashed")
    outbox_event.mark_as_failed("handler crashed again")
    outbox_event.refresh_from_db()
    assert outbox_event.status == EventStatus.FAILED
    assert outbox_event.retry_count == 2
    assert outbox_event.error_message == "handler crashed again"
