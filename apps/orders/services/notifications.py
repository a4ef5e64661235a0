"""
Owner notifications: orders sent to the cash desk today.
"""
from typing import Any, Dict, List

from django.contrib.auth.models import User
from django.utils import timezone

from apps.orders.models import Order, OrderStatus


def sent_order_notifications(owner: User, day=None) -> List[Dict[str, Any]]:
    day = day or timezone.localdate()
    orders = Order.objects.filter(
        owner=owner,
        status=OrderStatus.SENT,
        created_at__date=day
    ).order_by('-created_at')

    return [
        {
            'id': str(order.id),
            'title': f"Commande envoyée #{order.order_number}",
            'message': f"Table {order.table_number} • {order.items_summary()}",
            'created_at': order.created_at,
            'agent_code': order.agent_code,
        }
        for order in orders
    ]
