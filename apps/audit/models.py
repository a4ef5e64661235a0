"""
Audit models for NACK POS.
"""
from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from apps.core.models import BaseModel


class EventLog(BaseModel):
    """
    Append-only audit log of business events.
    Either a logged-in owner or a team member (by agent code) is the actor.
    """
    actor_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_events',
        verbose_name=_('Actor user')
    )

    agent_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Agent code')
    )

    entity_type = models.CharField(
        max_length=50,
        verbose_name=_('Entity type'),
        help_text=_('Model name of the affected entity')
    )

    entity_id = models.CharField(
        max_length=36,
        verbose_name=_('Entity ID')
    )

    action = models.CharField(
        max_length=50,
        verbose_name=_('Action')
    )

    before_data = models.JSONField(
        null=True,
        blank=True,
        verbose_name=_('Before data')
    )

    after_data = models.JSONField(
        null=True,
        blank=True,
        verbose_name=_('After data')
    )

    timestamp = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Timestamp')
    )

    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        verbose_name=_('IP address')
    )

    request_id = models.CharField(
        max_length=36,
        blank=True,
        verbose_name=_('Request ID')
    )

    class Meta:
        verbose_name = _('Event Log')
        verbose_name_plural = _('Event Logs')
        db_table = 'audit_event_log'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['actor_user']),
            models.Index(fields=['entity_type', 'entity_id']),
            models.Index(fields=['timestamp']),
        ]

    def __str__(self):
        actor = self.actor_user.username if self.actor_user else self.agent_code
        return f"{actor} {self.action} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if self.pk and EventLog.objects.filter(pk=self.pk).exists():
            raise ValueError(_("Audit records are immutable"))
        super().save(*args, **kwargs)
