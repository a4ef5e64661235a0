"""
Owner and establishment models for NACK POS.
"""
from django.contrib.auth.models import User
from django.db import models
from django.utils.translation import gettext_lazy as _
from apps.core.models import TimestampedModel


class EstablishmentType(models.TextChoices):
    """Kind of venue."""
    BAR = 'bar', _('Bar')
    RESTAURANT = 'restaurant', _('Restaurant')
    NIGHTCLUB = 'nightclub', _('Nightclub')
    OTHER = 'other', _('Other')


class Establishment(TimestampedModel):
    """
    The venue run by an owner account.
    One establishment per owner; filled in when the owner completes the profile.
    """
    owner = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='establishment',
        verbose_name=_('Owner')
    )

    name = models.CharField(
        max_length=150,
        verbose_name=_('Name')
    )

    establishment_type = models.CharField(
        max_length=20,
        choices=EstablishmentType.choices,
        default=EstablishmentType.BAR,
        verbose_name=_('Type')
    )

    city = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_('City')
    )

    address = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Address')
    )

    phone = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('Phone number')
    )

    whatsapp_number = models.CharField(
        max_length=20,
        blank=True,
        verbose_name=_('WhatsApp number'),
        help_text=_('Used for public ticket reservations')
    )

    logo = models.ImageField(
        upload_to='establishments/',
        blank=True,
        null=True,
        verbose_name=_('Logo')
    )

    welcome_credits_granted = models.BooleanField(
        default=False,
        verbose_name=_('Welcome credits granted')
    )

    class Meta:
        verbose_name = _('Establishment')
        verbose_name_plural = _('Establishments')
        db_table = 'users_establishment'

    def __str__(self):
        return self.name

    @property
    def is_complete(self):
        """Profile is complete once the venue has a name, a type and a city."""
        return bool(self.name and self.establishment_type and self.city)
