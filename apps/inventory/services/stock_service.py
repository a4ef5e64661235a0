"""
Stock service for NACK POS.
Stock changes happen on row-locked products and never go below zero.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.inventory.models import Loss, Product

logger = logging.getLogger(__name__)


class StockServiceError(Exception):
    """Base exception for stock service errors."""
    pass


class StockService:
    """Service class for stock management operations."""

    @staticmethod
    def get_product(owner: User, product_id) -> Product:
        try:
            return Product.objects.get(id=product_id, owner=owner)
        except (Product.DoesNotExist, ValidationError, ValueError):
            raise StockServiceError(_("Product not found"))

    @staticmethod
    @transaction.atomic
    def restock(owner: User, product_id, quantity: int, agent_code: str = '') -> Product:
        """
        Add units to a product's stock.
        """
        if quantity <= 0:
            raise StockServiceError(_("Restock quantity must be positive"))

        product = StockService._locked(owner, product_id)
        before = product.quantity
        product.quantity = before + quantity
        product.save(update_fields=['quantity', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='Product',
            entity_id=str(product.id),
            action='restock',
            before_data={'quantity': before},
            after_data={'quantity': product.quantity},
            agent_code=agent_code
        )
        return product

    @staticmethod
    @transaction.atomic
    def decrement_items(owner: User, items: Iterable[Dict[str, Any]]) -> List[Product]:
        """
        Remove the units of sold items from stock.

        Items without a product_id (event tickets) are skipped. Products are
        locked in id order and every line is checked before anything is written,
        so either all lines are applied or none.

        Raises:
            StockServiceError: if a product is unknown or lacks stock
        """
        needed: Dict[str, int] = {}
        for item in items:
            if item.get('is_event') or not item.get('product_id'):
                continue
            key = str(item['product_id'])
            needed[key] = needed.get(key, 0) + int(item.get('quantity', 0))

        if not needed:
            return []

        products = list(
            Product.objects.select_for_update()
            .filter(owner=owner, id__in=needed.keys())
            .order_by('id')
        )
        found = {str(p.id): p for p in products}

        for product_id, quantity in needed.items():
            product = found.get(product_id)
            if product is None:
                raise StockServiceError(_("Product not found"))
            if product.quantity < quantity:
                raise StockServiceError(
                    _("Stock insuffisant pour %(name)s: %(available)s disponible(s)") % {
                        'name': product.name,
                        'available': product.quantity,
                    }
                )

        for product_id, quantity in needed.items():
            product = found[product_id]
            product.quantity = product.quantity - quantity
            product.save(update_fields=['quantity', 'updated_at'])

        logger.info("Stock decremented", extra={
            'owner_id': owner.id,
            'lines': len(needed),
            'event_type': 'stock_decremented'
        })
        return products

    @staticmethod
    @transaction.atomic
    def record_loss(
        owner: User,
        product_id,
        quantity: int,
        reason: str = '',
        date=None
    ) -> Loss:
        """
        Write off units of a product.
        """
        if quantity <= 0:
            raise StockServiceError(_("Loss quantity must be positive"))

        product = StockService._locked(owner, product_id)
        if product.quantity < quantity:
            raise StockServiceError(_("Loss exceeds available stock"))

        product.quantity = product.quantity - quantity
        product.save(update_fields=['quantity', 'updated_at'])

        loss = Loss(owner=owner, product=product, quantity=quantity, reason=reason)
        if date is not None:
            loss.date = date
        loss.save()

        AuditService.log_event(
            actor_user=owner,
            entity_type='Loss',
            entity_id=str(loss.id),
            action='record_loss',
            after_data={'product': product.name, 'quantity': quantity, 'reason': reason}
        )
        return loss

    @staticmethod
    def low_stock(owner: User, threshold: Optional[int] = None):
        """
        Active products at or below their low-stock threshold.
        """
        default = settings.NACK['LOW_STOCK_THRESHOLD'] if threshold is None else threshold
        return Product.objects.filter(owner=owner, is_active=True).filter(
            Q(low_stock_threshold__isnull=False, quantity__lte=F('low_stock_threshold')) |
            Q(low_stock_threshold__isnull=True, quantity__lte=default)
        ).order_by('quantity', 'name')

    @staticmethod
    def _locked(owner: User, product_id) -> Product:
        try:
            return Product.objects.select_for_update().get(id=product_id, owner=owner)
        except (Product.DoesNotExist, ValidationError, ValueError):
            raise StockServiceError(_("Product not found"))
