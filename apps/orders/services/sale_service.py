"""
Counter sales for NACK POS.
"""
import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.inventory.services.cart import Cart
from apps.inventory.services.stock_service import StockService, StockServiceError
from apps.orders.models import PaymentMethod, Sale, SaleSource
from apps.orders.services.order_service import OrderServiceError, compute_change

logger = logging.getLogger(__name__)


class SaleService:
    """Service class for direct sales."""

    @staticmethod
    @transaction.atomic
    def create_sale(
        owner: User,
        items: List[Dict[str, Any]],
        payment_method: str,
        amount_received: Optional[int] = None,
        agent_code: str = ''
    ) -> Sale:
        """
        Record a counter sale and take its units out of stock in one transaction.

        Raises:
            OrderServiceError: empty cart, no payment method, cash short or stock short
        """
        if not items:
            raise OrderServiceError(_("Panier vide"))

        try:
            cart = Cart.from_items(owner, items)
            if cart.is_empty:
                raise OrderServiceError(_("Panier vide"))
            change = compute_change(payment_method, cart.total, amount_received)
            StockService.decrement_items(owner, cart.items())
        except StockServiceError as e:
            raise OrderServiceError(str(e)) from e

        sale = Sale.objects.create(
            owner=owner,
            total=cart.total,
            items=cart.items(),
            payment_method=payment_method,
            source=SaleSource.COUNTER,
            agent_code=agent_code or '',
            cashier_code=agent_code or '',
            amount_received=amount_received if payment_method == PaymentMethod.CASH else None,
            change_given=change
        )

        AuditService.log_event(
            actor_user=owner,
            entity_type='Sale',
            entity_id=str(sale.id),
            action='create_sale',
            after_data={'total': sale.total, 'lines': len(sale.items)},
            agent_code=agent_code
        )

        logger.info("Counter sale recorded", extra={
            'owner_id': owner.id,
            'sale_id': str(sale.id),
            'total': sale.total,
            'event_type': 'sale_created'
        })
        return sale

    @staticmethod
    def sales_of_day(owner: User, day=None, cashier_code: Optional[str] = None):
        day = day or timezone.localdate()
        queryset = Sale.objects.filter(owner=owner, created_at__date=day)
        if cashier_code:
            queryset = queryset.filter(cashier_code=cashier_code)
        return queryset

    @staticmethod
    def daily_sales_total(owner: User, day=None, cashier_code: Optional[str] = None) -> int:
        """Sum of today's sales, optionally for one cashier."""
        queryset = SaleService.sales_of_day(owner, day, cashier_code)
        return queryset.aggregate(total=Sum('total'))['total'] or 0
