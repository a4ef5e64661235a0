"""
Event and ticket models for NACK POS.
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from apps.core.models import BaseModel, OwnedModel


def default_location():
    return settings.NACK['DEFAULT_EVENT_LOCATION']


def default_capacity():
    return settings.NACK['DEFAULT_EVENT_CAPACITY']


def default_currency():
    return settings.NACK['CURRENCY']


class Event(OwnedModel):
    """A ticketed event hosted by the establishment."""
    title = models.CharField(
        max_length=200,
        verbose_name=_('Title')
    )

    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    date = models.DateField(verbose_name=_('Date'))

    time = models.TimeField(verbose_name=_('Time'))

    location = models.CharField(
        max_length=200,
        default=default_location,
        verbose_name=_('Location')
    )

    max_capacity = models.PositiveIntegerField(
        default=default_capacity,
        validators=[MinValueValidator(1)],
        verbose_name=_('Capacity')
    )

    ticket_price = models.PositiveIntegerField(
        verbose_name=_('Ticket price')
    )

    currency = models.CharField(
        max_length=3,
        default=default_currency,
        verbose_name=_('Currency')
    )

    image = models.ImageField(
        upload_to='events/',
        blank=True,
        null=True,
        verbose_name=_('Image')
    )

    whatsapp_number = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('WhatsApp number')
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active')
    )

    tickets_sold = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Tickets sold')
    )

    class Meta:
        verbose_name = _('Event')
        verbose_name_plural = _('Events')
        db_table = 'events_event'
        ordering = ['date', 'time']
        indexes = [
            models.Index(fields=['owner', 'date']),
        ]

    def __str__(self):
        return f"{self.title} ({self.date})"

    @property
    def shareable_link(self):
        return f"/event/{self.id}"

    @property
    def remaining_places(self):
        return max(0, self.max_capacity - self.tickets_sold)

    @property
    def is_full(self):
        return self.tickets_sold >= self.max_capacity


class TicketStatus(models.TextChoices):
    RESERVED = 'reserved', _('Reserved')
    PAID = 'paid', _('Paid')
    CANCELLED = 'cancelled', _('Cancelled')


class TicketSource(models.TextChoices):
    ONLINE = 'online', _('Online reservation')
    DOOR = 'door', _('Door sale')


class Ticket(OwnedModel):
    """
    Admission for one or more people to an event.
    Its QR code carries {"t": ticket id, "e": event id}.
    """
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name='tickets',
        verbose_name=_('Event')
    )

    customer_name = models.CharField(
        max_length=150,
        verbose_name=_('Customer name')
    )

    customer_email = models.EmailField(
        blank=True,
        verbose_name=_('Customer email')
    )

    customer_phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Customer phone')
    )

    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        verbose_name=_('Quantity')
    )

    total_amount = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Total amount')
    )

    status = models.CharField(
        max_length=10,
        choices=TicketStatus.choices,
        default=TicketStatus.RESERVED,
        verbose_name=_('Status')
    )

    checked_in = models.BooleanField(
        default=False,
        verbose_name=_('Checked in')
    )

    checked_in_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Checked in at')
    )

    checked_in_by = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Checked in by')
    )
    source = models.CharField(
        max_length=10,
        choices=TicketSource.choices,
        default=TicketSource.ONLINE,
        verbose_name=_('Source')
    )

    class Meta:
        verbose_name = _('Ticket')
        verbose_name_plural = _('Tickets')
        db_table = 'events_ticket'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['event', 'status']),
        ]

    def __str__(self):
        return f"{self.customer_name} x{self.quantity} ({self.event.title})"

    @property
    def qr_payload(self):
        return {'t': str(self.id), 'e': str(self.event_id)}


class ScanResult(models.TextChoices):
    VALID = 'valid', _('Valid')
    ALREADY_USED = 'already_used', _('Already used')
    INVALID = 'invalid', _('Invalid')


class ScanRecord(BaseModel):
    """One entry of a door agent's recent scan history."""
    agent = models.ForeignKey(
        'team.TeamMember',
        on_delete=models.CASCADE,
        related_name='scans',
        verbose_name=_('Agent')
    )

    event = models.ForeignKey(
        Event,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Event')
    )

    ticket_ref = models.CharField(
        max_length=64,
        blank=True,
        verbose_name=_('Ticket reference')
    )

    customer_name = models.CharField(
        max_length=150,
        default='Inconnu',
        verbose_name=_('Customer name')
    )

    result = models.CharField(
        max_length=15,
        choices=ScanResult.choices,
        verbose_name=_('Result')
    )

    class Meta:
        verbose_name = _('Scan')
        verbose_name_plural = _('Scans')
        db_table = 'events_scan_record'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.ticket_ref} {self.result}"
