"""
Celery tasks for offline replay.
"""
import logging
from celery import shared_task
from django.utils import timezone
from apps.sync.services.offline_queue import OfflineQueue
from apps.sync.services.processor import TaskProcessor

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def flush_offline_queue(self, owner_id=None):
    """
    Periodic task replaying every owner's pending offline writes.
    Each owner's queue is independent: a stuck task only blocks its own owner.
    """
    processor = TaskProcessor()
    owners = OfflineQueue.owners_with_pending()
    if owner_id is not None:
        owners = owners.filter(id=owner_id)

    processed = 0
    blocked = 0
    for owner in owners:
        report = OfflineQueue(owner).flush(processor)
        processed += report.processed
        if report.blocked:
            blocked += 1

    if processed or blocked:
        logger.info(
            f"Offline replay completed. {processed} tasks applied, {blocked} queues blocked",
            extra={
                'task_id': self.request.id,
                'processed': processed,
                'blocked': blocked,
                'event_type': 'offline_replay_completed'
            }
        )

    return {
        'status': 'success',
        'processed': processed,
        'blocked_queues': blocked,
        'timestamp': timezone.now().isoformat()
    }
