"""Asynchronous tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import event_from_payload
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_RETRIES = 5


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Deliver pending outbox rows to the in-process event bus.

    Rows are locked with ``skip_locked`` so concurrent workers never
    publish the same event twice.  A failing handler marks its row as
    ``FAILED``; it is retried on later runs until ``OUTBOX_MAX_RETRIES``.
    """
    published = failed = 0
    with transaction.atomic():
        rows = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(
                status__in=[EventStatus.PENDING, EventStatus.FAILED],
                retry_count__lt=OUTBOX_MAX_RETRIES,
            )
            .order_by("created_at")[:batch_size]
        )
        for row in rows:
            log = logger.bind(
                outbox_id=str(row.id),
                event_type=row.event_type,
                aggregate_id=row.aggregate_id,
            )
            try:
                event = event_from_payload(row.event_type, row.payload)
                event_bus.publish(event)
            except Exception as exc:
                log.exception("outbox.publish_failed")
                row.mark_as_failed(str(exc))
                failed += 1
                continue
            row.mark_as_published()
            published += 1

    logger.info("outbox.batch_processed", published=published, failed=failed)
    return {"published": published, "failed": failed}
