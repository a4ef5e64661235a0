"""
Order and sale models for NACK POS.
"""
from django.db import models
from django.utils.translation import gettext_lazy as _
from apps.core.models import OwnedModel


class OrderStatus(models.TextChoices):
    """Lifecycle of a table order."""
    PENDING = 'pending', _('Pending')
    SENT = 'sent', _('Sent to cashier')
    CANCELLED = 'cancelled', _('Cancelled')
    PAID = 'paid', _('Paid')


class PaymentMethod(models.TextChoices):
    CARD = 'card', _('Card')
    CASH = 'cash', _('Cash')


class SaleSource(models.TextChoices):
    """Where a sale was recorded."""
    COUNTER = 'counter', _('Counter')
    ORDER = 'order', _('Table order')
    EVENT = 'event', _('Ticket reservation')
    MANUAL = 'manual', _('Manual ticket sale')


class Order(OwnedModel):
    """
    A table order taken by a waiter and settled at the cash desk.
    Items are a snapshot of the cart lines at order time.
    """
    order_number = models.PositiveIntegerField(
        verbose_name=_('Order number')
    )

    table_number = models.CharField(
        max_length=20,
        verbose_name=_('Table number')
    )

    items = models.JSONField(
        default=list,
        verbose_name=_('Items')
    )

    total = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Total')
    )

    status = models.CharField(
        max_length=10,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        verbose_name=_('Status')
    )

    agent_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Waiter code')
    )

    paid_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Paid at')
    )

    class Meta:
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        db_table = 'orders_order'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['owner', 'order_number'], name='unique_order_number_per_owner'),
        ]
        indexes = [
            models.Index(fields=['owner', 'status']),
            models.Index(fields=['owner', 'created_at']),
        ]

    def __str__(self):
        return f"Commande #{self.order_number} (table {self.table_number})"

    def items_summary(self) -> str:
        return ', '.join(f"{item.get('quantity', 0)}x {item.get('name', '')}" for item in self.items)


class Sale(OwnedModel):
    """
    A cashed transaction: counter sale, paid order or ticket sale.
    """
    total = models.PositiveIntegerField(
        verbose_name=_('Total')
    )

    items = models.JSONField(
        default=list,
        verbose_name=_('Items')
    )

    payment_method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
        verbose_name=_('Payment method')
    )

    source = models.CharField(
        max_length=10,
        choices=SaleSource.choices,
        default=SaleSource.COUNTER,
        verbose_name=_('Source')
    )

    order = models.OneToOneField(
        Order,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sale',
        verbose_name=_('Order')
    )

    event = models.ForeignKey(
        'events.Event',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales',
        verbose_name=_('Event')
    )

    agent_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Agent code')
    )

    cashier_code = models.CharField(
        max_length=10,
        blank=True,
        verbose_name=_('Cashier code')
    )

    amount_received = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Amount received')
    )

    change_given = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Change given')
    )

    class Meta:
        verbose_name = _('Sale')
        verbose_name_plural = _('Sales')
        db_table = 'orders_sale'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', 'created_at']),
            models.Index(fields=['owner', 'source']),
        ]

    def __str__(self):
        return f"Vente {self.total} XAF ({self.get_payment_method_display()})"

    @property
    def is_event_sale(self):
        return self.event_id is not None or any(item.get('is_event') for item in self.items)
