"""
Inventory models for NACK POS.
Amounts are whole XAF francs; stock is counted in units.
"""
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from apps.core.models import OwnedModel


class ProductCategory(models.TextChoices):
    """Menu categories."""
    BEER = 'biere', _('Beer')
    SOFT = 'soft', _('Soft drink')
    WINE = 'vin', _('Wine')
    SPIRIT = 'spiritueux', _('Spirits')
    COCKTAIL = 'cocktail', _('Cocktail')
    FOOD = 'plat', _('Food')
    OTHER = 'autre', _('Other')


class Product(OwnedModel):
    """
    A sellable product with its stock level.
    A product may also be sold as a formula: a bundle of units at a special price.
    """
    name = models.CharField(
        max_length=150,
        verbose_name=_('Name')
    )

    category = models.CharField(
        max_length=20,
        choices=ProductCategory.choices,
        default=ProductCategory.OTHER,
        verbose_name=_('Category')
    )

    description = models.TextField(
        blank=True,
        verbose_name=_('Description')
    )

    price = models.PositiveIntegerField(
        verbose_name=_('Selling price')
    )

    cost = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Unit cost'),
        help_text=_('Used to value losses')
    )

    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Stock quantity')
    )

    low_stock_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Low stock threshold'),
        help_text=_('Falls back to the establishment default when empty')
    )

    formula_units = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        verbose_name=_('Formula units')
    )

    formula_price = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Formula unit price')
    )

    image = models.ImageField(
        upload_to='products/',
        blank=True,
        null=True,
        verbose_name=_('Image')
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active')
    )

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        db_table = 'inventory_product'
        ordering = ['name']
        indexes = [
            models.Index(fields=['owner', 'category']),
            models.Index(fields=['owner', 'is_active']),
        ]

    def __str__(self):
        return f"{self.name} ({self.quantity})"

    @property
    def has_formula(self):
        return bool(self.formula_units and self.formula_price is not None)


class Loss(OwnedModel):
    """Stock written off (breakage, spoilage, offered drinks)."""
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='losses',
        verbose_name=_('Product')
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Quantity')
    )

    reason = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Reason')
    )

    date = models.DateTimeField(
        default=timezone.now,
        verbose_name=_('Date')
    )

    class Meta:
        verbose_name = _('Loss')
        verbose_name_plural = _('Losses')
        db_table = 'inventory_loss'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['owner', 'date']),
        ]

    def __str__(self):
        return f"{self.product.name} -{self.quantity}"

    @property
    def value(self):
        """Loss valued at product cost."""
        return self.quantity * self.product.cost
