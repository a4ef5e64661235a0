"""
Billing models for NACK POS.
"""
from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from apps.core.models import BaseModel, TimestampedModel


class BillingAccount(TimestampedModel):
    """
    Subscription state and prepaid credits of an owner.
    Member credits pay for waiter/cashier seats, event credits for event creation.
    """
    owner = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='billing',
        verbose_name=_('Owner')
    )

    trial_started_at = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Trial started at')
    )

    subscription_active = models.BooleanField(
        default=False,
        verbose_name=_('Subscription active')
    )

    subscription_paid_until = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Subscription paid until')
    )

    member_credits = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Member credits')
    )

    event_credits = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Event credits')
    )

    class Meta:
        verbose_name = _('Billing account')
        verbose_name_plural = _('Billing accounts')
        db_table = 'billing_account'

    def __str__(self):
        return f"Billing {self.owner.username}"


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', _('Pending')
    PAID = 'paid', _('Paid')
    FAILED = 'failed', _('Failed')


class PaymentIntent(BaseModel):
    """A payment started on the gateway, confirmed by redirect or callback."""
    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='payments',
        verbose_name=_('Owner')
    )

    reference = models.CharField(
        max_length=100,
        verbose_name=_('Reference'),
        help_text=_('Abonnement, Ajout membre or Création d\'événement')
    )

    amount = models.PositiveIntegerField(verbose_name=_('Amount'))

    status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        verbose_name=_('Status')
    )

    link = models.URLField(
        max_length=500,
        blank=True,
        verbose_name=_('Gateway link')
    )

    paid_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Paid at'))

    class Meta:
        verbose_name = _('Payment')
        verbose_name_plural = _('Payments')
        db_table = 'billing_payment'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'status']),
        ]

    def __str__(self):
        return f"{self.reference} {self.amount} ({self.status})"
