"""
Order service for NACK POS.
Handles table orders from the waiter screen and their payment at the cash desk.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Max
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.inventory.services.cart import Cart
from apps.inventory.services.stock_service import StockService, StockServiceError
from apps.orders.models import Order, OrderStatus, PaymentMethod, Sale, SaleSource

logger = logging.getLogger(__name__)


class OrderServiceError(Exception):
    """Base exception for order service errors."""
    pass


@dataclass
class PaymentResult:
    """Outcome of settling an order."""
    order: Order
    sale: Optional[Sale]
    already_paid: bool
    change: int = 0


def compute_change(payment_method: str, total: int, amount_received: Optional[int]) -> int:
    """
    Change to hand back for a payment.

    Raises:
        OrderServiceError: when cash received does not cover the total
    """
    if payment_method not in PaymentMethod.values:
        raise OrderServiceError(_("Mode de paiement requis"))
    if payment_method != PaymentMethod.CASH:
        return 0
    if amount_received is None or amount_received < total:
        raise OrderServiceError(_("Montant reçu insuffisant"))
    return max(0, amount_received - total)


class OrderService:
    """Service class for table orders."""

    @staticmethod
    def next_order_number(owner: User) -> int:
        current = Order.objects.filter(owner=owner).aggregate(m=Max('order_number'))['m']
        return (current or 0) + 1

    @staticmethod
    @transaction.atomic
    def create_order(
        owner: User,
        table_number: str,
        items: List[Dict[str, Any]],
        agent_code: str = '',
        status: str = OrderStatus.SENT
    ) -> Order:
        """
        Record a table order.

        Items are re-priced from the product table and checked against stock;
        stock itself is only taken when the order is paid.

        Args:
            owner: Establishment owner
            table_number: Table the order is for
            items: Client cart lines ({product_id, quantity, is_formula})
            agent_code: Waiter code
            status: Initial status, sent to the cash desk by default

        Returns:
            Created Order
        """
        table_number = (table_number or '').strip()
        if not table_number:
            raise OrderServiceError(_("Numéro de table requis"))
        if not items:
            raise OrderServiceError(_("Panier vide"))
        if status not in (OrderStatus.PENDING, OrderStatus.SENT):
            raise OrderServiceError(_("Invalid initial status"))

        try:
            cart = Cart.from_items(owner, items)
        except StockServiceError as e:
            raise OrderServiceError(str(e)) from e
        if cart.is_empty:
            raise OrderServiceError(_("Panier vide"))

        # Serialise numbering per owner
        User.objects.select_for_update().filter(pk=owner.pk).first()
        order = Order.objects.create(
            owner=owner,
            order_number=OrderService.next_order_number(owner),
            table_number=table_number,
            items=cart.items(),
            total=cart.total,
            status=status,
            agent_code=agent_code or ''
        )

        AuditService.log_event(
            actor_user=owner,
            entity_type='Order',
            entity_id=str(order.id),
            action='create_order',
            after_data={'order_number': order.order_number, 'table': table_number, 'total': order.total},
            agent_code=agent_code
        )

        logger.info(f"Order #{order.order_number} created", extra={
            'owner_id': owner.id,
            'order_id': str(order.id),
            'agent_code': agent_code,
            'event_type': 'order_created'
        })
        return order

    @staticmethod
    @transaction.atomic
    def update_status(owner: User, order_id, status: str, agent_code: str = '') -> Order:
        """
        Move an order between pending, sent and cancelled.
        Paid orders are final; payment goes through pay_order.
        """
        if status not in OrderStatus.values:
            raise OrderServiceError(_("Unknown status"))
        if status == OrderStatus.PAID:
            raise OrderServiceError(_("Use payment to mark an order as paid"))

        order = OrderService._locked(owner, order_id)
        if order.status == OrderStatus.PAID:
            raise OrderServiceError(_("Paid orders cannot change status"))

        before = order.status
        order.status = status
        order.save(update_fields=['status', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='Order',
            entity_id=str(order.id),
            action='update_status',
            before_data={'status': before},
            after_data={'status': status},
            agent_code=agent_code
        )
        return order

    @staticmethod
    @transaction.atomic
    def pay_order(
        owner: User,
        order_id,
        payment_method: str,
        amount_received: Optional[int] = None,
        cashier_code: str = ''
    ) -> PaymentResult:
        """
        Settle an order at the cash desk.

        The order row is locked for the whole operation. Paying an order that
        is already paid is not an error: it returns already_paid with nothing
        written. Otherwise a sale is created, the order marked paid and the
        stock of each line decremented.

        Raises:
            OrderServiceError: order missing, cancelled, cash short or stock short
        """
        order = OrderService._locked(owner, order_id)

        if order.status == OrderStatus.PAID:
            return PaymentResult(order=order, sale=None, already_paid=True)
        if order.status == OrderStatus.CANCELLED:
            raise OrderServiceError(_("Commande annulée"))

        change = compute_change(payment_method, order.total, amount_received)

        try:
            StockService.decrement_items(owner, order.items)
        except StockServiceError as e:
            raise OrderServiceError(str(e)) from e

        sale = Sale.objects.create(
            owner=owner,
            total=order.total,
            items=order.items,
            payment_method=payment_method,
            source=SaleSource.ORDER,
            order=order,
            agent_code=order.agent_code,
            cashier_code=cashier_code or '',
            amount_received=amount_received if payment_method == PaymentMethod.CASH else None,
            change_given=change
        )

        order.status = OrderStatus.PAID
        order.paid_at = timezone.now()
        order.save(update_fields=['status', 'paid_at', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='Order',
            entity_id=str(order.id),
            action='pay_order',
            after_data={'sale_id': str(sale.id), 'total': sale.total, 'payment_method': payment_method},
            agent_code=cashier_code
        )

        logger.info(f"Order #{order.order_number} paid", extra={
            'owner_id': owner.id,
            'order_id': str(order.id),
            'sale_id': str(sale.id),
            'event_type': 'order_paid'
        })
        return PaymentResult(order=order, sale=sale, already_paid=False, change=change)

    @staticmethod
    def open_orders(owner: User):
        """Orders waiting at the cash desk."""
        return Order.objects.filter(owner=owner, status=OrderStatus.SENT).order_by('created_at')

    @staticmethod
    def _locked(owner: User, order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(id=order_id, owner=owner)
        except (Order.DoesNotExist, ValidationError, ValueError):
            raise OrderServiceError(_("Commande introuvable"))
