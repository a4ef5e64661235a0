"""
Billing service for NACK POS.
Trial period, monthly subscription and prepaid credits.
"""
import logging
import math
from datetime import timedelta
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.billing.models import BillingAccount, PaymentIntent, PaymentStatus
from apps.billing.services.singpay import PaymentGatewayError, SingPayClient

logger = logging.getLogger(__name__)


class BillingError(Exception):
    """Raised for billing rule violations."""


class PaymentRequired(BillingError):
    """
    Raised when an action needs a credit the owner does not have.
    Carries what the client must pay to unlock it.
    """

    def __init__(self, message, amount: int, reference: str):
        super().__init__(message)
        self.amount = amount
        self.reference = reference


REFERENCE_SUBSCRIPTION = 'Abonnement'
REFERENCE_MEMBER = 'Ajout membre'
REFERENCE_EVENT = "Création d'événement"


class BillingService:
    """Service class for subscription and credit management."""

    @staticmethod
    def get_account(owner: User) -> BillingAccount:
        account, _created = BillingAccount.objects.get_or_create(
            owner=owner,
            defaults={'trial_started_at': owner.date_joined or timezone.now()}
        )
        return account

    @staticmethod
    def trial_ends_at(account: BillingAccount):
        return account.trial_started_at + timedelta(days=settings.NACK['TRIAL_DAYS'])

    @staticmethod
    def get_state(owner: User, now=None) -> Dict[str, Any]:
        """
        Billing snapshot for an owner.

        Returns:
            Dictionary with trial, subscription and credit information
        """
        now = now or timezone.now()
        account = BillingService.get_account(owner)
        trial_end = BillingService.trial_ends_at(account)
        in_trial = now < trial_end
        subscribed = bool(
            account.subscription_active
            and account.subscription_paid_until
            and account.subscription_paid_until > now
        )
        days_left = math.ceil((trial_end - now).total_seconds() / 86400) if in_trial else 0

        return {
            'is_in_trial': in_trial,
            'trial_ends_at': trial_end,
            'trial_days_left': days_left,
            'subscription_active': subscribed,
            'subscription_paid_until': account.subscription_paid_until,
            'member_credits': account.member_credits,
            'event_credits': account.event_credits,
            'has_access': in_trial or subscribed,
        }

    @staticmethod
    @transaction.atomic
    def add_member_credits(owner: User, count: int = 1) -> BillingAccount:
        account = BillingService._locked(owner)
        account.member_credits += count
        account.save(update_fields=['member_credits', 'updated_at'])
        return account

    @staticmethod
    @transaction.atomic
    def add_event_credits(owner: User, count: int = 1) -> BillingAccount:
        account = BillingService._locked(owner)
        account.event_credits += count
        account.save(update_fields=['event_credits', 'updated_at'])
        return account

    @staticmethod
    @transaction.atomic
    def consume_member_credit(owner: User) -> bool:
        """Take one member credit. Returns False when none is left."""
        account = BillingService._locked(owner)
        if account.member_credits <= 0:
            return False
        account.member_credits = max(0, account.member_credits - 1)
        account.save(update_fields=['member_credits', 'updated_at'])
        return True

    @staticmethod
    @transaction.atomic
    def consume_event_credit(owner: User) -> bool:
        """Take one event credit. Returns False when none is left."""
        account = BillingService._locked(owner)
        if account.event_credits <= 0:
            return False
        account.event_credits = max(0, account.event_credits - 1)
        account.save(update_fields=['event_credits', 'updated_at'])
        return True

    @staticmethod
    @transaction.atomic
    def apply_payment_success(owner: User, reference: str) -> Optional[str]:
        """
        Grant what a successful payment bought, based on its reference.

        Returns:
            'subscription', 'member_credit', 'event_credit' or None when the
            reference is not recognised
        """
        ref = (reference or '').lower()
        account = BillingService._locked(owner)

        if 'abonnement' in ref:
            now = timezone.now()
            start = account.subscription_paid_until if (
                account.subscription_active
                and account.subscription_paid_until
                and account.subscription_paid_until > now
            ) else now
            account.subscription_active = True
            account.subscription_paid_until = start + timedelta(days=settings.NACK['SUBSCRIPTION_DAYS'])
            account.save(update_fields=['subscription_active', 'subscription_paid_until', 'updated_at'])
            granted = 'subscription'
        elif 'ajout' in ref:
            account.member_credits += 1
            account.save(update_fields=['member_credits', 'updated_at'])
            granted = 'member_credit'
        elif 'événement' in ref or 'evenement' in ref:
            account.event_credits += 1
            account.save(update_fields=['event_credits', 'updated_at'])
            granted = 'event_credit'
        else:
            logger.warning("Unknown payment reference", extra={
                'owner_id': owner.id,
                'reference': reference,
                'event_type': 'payment_reference_unknown'
            })
            return None

        AuditService.log_event(
            actor_user=owner,
            entity_type='BillingAccount',
            entity_id=str(account.pk),
            action='payment_applied',
            after_data={'reference': reference, 'granted': granted}
        )
        return granted

    @staticmethod
    def create_payment(
        owner: User,
        amount: int,
        reference: str,
        redirect_success: str = '',
        redirect_error: str = '',
        client: Optional[SingPayClient] = None
    ) -> PaymentIntent:
        """
        Open a gateway payment and remember it for later confirmation.
        """
        if amount <= 0:
            raise BillingError(_("Amount must be positive"))

        base = settings.NACK['PUBLIC_BASE_URL'].rstrip('/')
        intent = PaymentIntent.objects.create(owner=owner, reference=reference, amount=amount)
        redirect_success = redirect_success or f"{base}/?payment=success&intent={intent.id}"
        redirect_error = redirect_error or f"{base}/?payment=error&intent={intent.id}"

        client = client or SingPayClient()
        try:
            intent.link = client.start_payment(
                amount=amount,
                reference=reference,
                redirect_success=redirect_success,
                redirect_error=redirect_error,
                logo_url=f"{base}/favicon.png"
            )
        except PaymentGatewayError:
            intent.status = PaymentStatus.FAILED
            intent.save(update_fields=['status', 'updated_at'])
            raise
        intent.save(update_fields=['link', 'updated_at'])
        return intent

    @staticmethod
    @transaction.atomic
    def confirm_payment(intent_id) -> PaymentIntent:
        """
        Mark a payment as paid and apply it once.
        Confirming an already paid intent changes nothing.
        """
        intent = PaymentIntent.objects.select_for_update().get(id=intent_id)
        if intent.status == PaymentStatus.PAID:
            return intent

        intent.status = PaymentStatus.PAID
        intent.paid_at = timezone.now()
        intent.save(update_fields=['status', 'paid_at', 'updated_at'])
        BillingService.apply_payment_success(intent.owner, intent.reference)
        return intent

    @staticmethod
    def fail_payment(intent_id) -> PaymentIntent:
        intent = PaymentIntent.objects.get(id=intent_id)
        if intent.status == PaymentStatus.PENDING:
            intent.status = PaymentStatus.FAILED
            intent.save(update_fields=['status', 'updated_at'])
        return intent

    @staticmethod
    def expire_subscriptions(now=None) -> int:
        """Deactivate subscriptions whose paid period is over."""
        now = now or timezone.now()
        return BillingAccount.objects.filter(
            subscription_active=True,
            subscription_paid_until__lte=now
        ).update(subscription_active=False, updated_at=now)

    @staticmethod
    def _locked(owner: User) -> BillingAccount:
        BillingService.get_account(owner)
        return BillingAccount.objects.select_for_update().get(owner=owner)
