"""
Offline task queue models for NACK POS.
"""
import uuid
from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _
from apps.core.models import TimestampedModel


class TaskType(models.TextChoices):
    """Writes a client may queue while offline."""
    ADD_ORDER = 'add_order', _('Add order')
    PAY_ORDER = 'pay_order', _('Pay order')
    RESERVE_TICKET = 'reserve_ticket', _('Reserve ticket')
    ADD_TEAM_MEMBER = 'add_team_member', _('Add team member')


class TaskStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    FAILED = 'failed', _('Failed')


class OfflineTask(TimestampedModel):
    """
    One queued write. The auto-increment primary key gives the FIFO order
    of an owner's queue.
    """
    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='offline_tasks',
        verbose_name=_('Owner')
    )

    client_id = models.UUIDField(
        default=uuid.uuid4,
        verbose_name=_('Client task ID')
    )

    task_type = models.CharField(
        max_length=20,
        choices=TaskType.choices,
        verbose_name=_('Type')
    )

    payload = models.JSONField(
        default=dict,
        verbose_name=_('Payload')
    )

    agent_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Agent code')
    )

    queued_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Queued on device at')
    )

    status = models.CharField(
        max_length=10,
        choices=TaskStatus.choices,
        default=TaskStatus.PENDING,
        verbose_name=_('Status')
    )

    attempts = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Attempts')
    )

    last_error = models.TextField(
        blank=True,
        verbose_name=_('Last error')
    )

    class Meta:
        verbose_name = _('Offline task')
        verbose_name_plural = _('Offline tasks')
        db_table = 'sync_offline_task'
        ordering = ['id']
        indexes = [
            models.Index(fields=['owner', 'status', 'id']),
        ]

    def __str__(self):
        return f"{self.task_type} #{self.pk} ({self.status})"
