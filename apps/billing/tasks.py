"""
Celery tasks for billing.
"""
import logging
from celery import shared_task
from django.utils import timezone
from apps.billing.services.billing_service import BillingService

logger = logging.getLogger(__name__)


@shared_task(bind=True)
def expire_subscriptions(self):
    """
    Daily task turning off subscriptions whose paid period ended.
    """
    expired = BillingService.expire_subscriptions()

    logger.info(
        f"Subscription expiry completed. {expired} subscriptions expired",
        extra={
            'task_id': self.request.id,
            'expired_count': expired,
            'event_type': 'subscriptions_expired'
        }
    )

    return {
        'status': 'success',
        'expired': expired,
        'timestamp': timezone.now().isoformat()
    }
