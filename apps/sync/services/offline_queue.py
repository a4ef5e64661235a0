"""
Server-side offline write queue.

Clients that lose connectivity keep their writes and upload them once back
online; the server replays them in arrival order per owner. Delivery is
best effort: there are no idempotency keys, so a write that was applied
before the client lost the response can be applied twice.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from apps.sync.models import OfflineTask, TaskStatus, TaskType

logger = logging.getLogger(__name__)


class OfflineQueueError(Exception):
    """Raised for malformed queued tasks."""
    pass


@dataclass
class FlushReport:
    processed: int = 0
    failed: Optional[OfflineTask] = None
    error: str = ''
    dead_lettered: List[int] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return self.failed is not None


class OfflineQueue:
    """FIFO of pending writes for one owner."""

    def __init__(self, owner: User):
        self.owner = owner

    def _pending(self):
        return OfflineTask.objects.filter(owner=self.owner, status=TaskStatus.PENDING).order_by('id')

    def enqueue(
        self,
        task_type: str,
        payload: Dict[str, Any],
        agent_code: str = '',
        client_id=None,
        queued_at=None
    ) -> OfflineTask:
        if task_type not in TaskType.values:
            raise OfflineQueueError(_("Unknown task type: %(type)s") % {'type': task_type})
        if not isinstance(payload, dict):
            raise OfflineQueueError(_("Task payload must be an object"))

        task = OfflineTask(
            owner=self.owner,
            task_type=task_type,
            payload=payload,
            agent_code=agent_code or '',
            queued_at=queued_at
        )
        if client_id:
            task.client_id = client_id
        task.save()
        return task

    def peek(self) -> Optional[OfflineTask]:
        return self._pending().first()

    def shift(self) -> Optional[OfflineTask]:
        task = self.peek()
        if task is not None:
            task.delete()
        return task

    def size(self) -> int:
        return self._pending().count()

    def failed(self):
        return OfflineTask.objects.filter(owner=self.owner, status=TaskStatus.FAILED).order_by('id')

    def flush(self, processor: Callable[[OfflineTask], Any], limit: Optional[int] = None) -> FlushReport:
        """
        Replay tasks from the head of the queue.

        A task leaves the queue only once the processor returned. The first
        failure stops the flush and the task stays at the head for the next
        run; after OFFLINE_MAX_ATTEMPTS failures it is set aside as failed so
        the rest of the queue can move on. At most `limit` tasks are
        processed per call.
        """
        limit = settings.NACK['OFFLINE_FLUSH_LIMIT'] if limit is None else limit
        max_attempts = settings.NACK['OFFLINE_MAX_ATTEMPTS']
        report = FlushReport()

        while report.processed < limit:
            task = self.peek()
            if task is None:
                break

            try:
                with transaction.atomic():
                    processor(task)
                    task.delete()
            except Exception as e:
                task.attempts += 1
                task.last_error = str(e)[:1000]
                if task.attempts >= max_attempts:
                    task.status = TaskStatus.FAILED
                    report.dead_lettered.append(task.pk)
                task.save(update_fields=['attempts', 'last_error', 'status', 'updated_at'])

                logger.warning(
                    f"Offline task {task.task_type} failed",
                    extra={
                        'owner_id': self.owner.id,
                        'task_id': task.pk,
                        'attempts': task.attempts,
                        'error': str(e),
                        'event_type': 'offline_task_failed'
                    }
                )
                if task.status == TaskStatus.FAILED:
                    continue
                report.failed = task
                report.error = str(e)
                break

            report.processed += 1

        if report.processed:
            logger.info(f"Replayed {report.processed} offline tasks", extra={
                'owner_id': self.owner.id,
                'processed': report.processed,
                'event_type': 'offline_queue_flushed'
            })
        return report

    @staticmethod
    def owners_with_pending():
        return User.objects.filter(
            offline_tasks__status=TaskStatus.PENDING
        ).distinct()
