"""
Celery tasks for inventory.
"""
import logging
from celery import shared_task
from django.contrib.auth.models import User
from django.utils import timezone
from apps.inventory.services.stock_service import StockService

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def check_low_stock(self):
    """
    Periodic task logging products that need restocking, per owner.
    """
    owners_alerted = 0
    for owner in User.objects.filter(establishment__isnull=False, is_active=True):
        products = list(StockService.low_stock(owner))
        if not products:
            continue
        owners_alerted += 1
        logger.warning(
            f"{len(products)} products low on stock",
            extra={
                'task_id': self.request.id,
                'owner_id': owner.id,
                'products': [f"{p.name}:{p.quantity}" for p in products],
                'event_type': 'low_stock'
            }
        )

    return {
        'status': 'success',
        'owners_alerted': owners_alerted,
        'timestamp': timezone.now().isoformat()
    }
