"""
Owner account service for NACK POS.
"""
import logging
from typing import Any, Dict, Iterable, Tuple

from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.billing.services.billing_service import BillingService
from apps.users.models import Establishment

logger = logging.getLogger(__name__)

RESET_SCOPES = ('sales', 'stock', 'team')


class AccountServiceError(Exception):
    """Base exception for account errors."""
    pass


class AccountService:
    """Service class for owner accounts and establishment settings."""

    ESTABLISHMENT_FIELDS = ('name', 'establishment_type', 'city', 'address', 'phone', 'whatsapp_number', 'logo')

    @staticmethod
    @transaction.atomic
    def register_owner(username: str, email: str, password: str, **extra) -> User:
        """
        Create an owner account. The trial starts now.
        """
        if User.objects.filter(username__iexact=username).exists():
            raise AccountServiceError(_("Ce nom d'utilisateur est déjà pris"))
        if email and User.objects.filter(email__iexact=email).exists():
            raise AccountServiceError(_("Un compte existe déjà avec cet email"))

        user = User.objects.create_user(username=username, email=email, password=password, **extra)
        BillingService.get_account(user)

        logger.info("Owner registered", extra={
            'owner_id': user.id,
            'event_type': 'owner_registered'
        })
        return user

    @staticmethod
    @transaction.atomic
    def complete_profile(owner: User, data: Dict[str, Any]) -> Tuple[Establishment, bool]:
        """
        Create or update the owner's establishment.

        The first time the profile becomes complete, the owner receives the
        welcome event credits.

        Returns:
            (establishment, whether welcome credits were granted by this call)
        """
        if not (data.get('name') or getattr(getattr(owner, 'establishment', None), 'name', '')):
            raise AccountServiceError(_("Le nom de l'établissement est requis"))

        values = {key: data[key] for key in AccountService.ESTABLISHMENT_FIELDS if key in data}
        establishment, created = Establishment.objects.select_for_update().get_or_create(
            owner=owner,
            defaults=values
        )
        if not created:
            for key, value in values.items():
                setattr(establishment, key, value)

        granted = False
        if establishment.is_complete and not establishment.welcome_credits_granted:
            BillingService.add_event_credits(owner, settings.NACK['WELCOME_EVENT_CREDITS'])
            establishment.welcome_credits_granted = True
            granted = True

        establishment.save()

        AuditService.log_event(
            actor_user=owner,
            entity_type='Establishment',
            entity_id=str(establishment.pk),
            action='create_establishment' if created else 'update_establishment',
            after_data={key: value for key, value in values.items() if key != 'logo'}
        )
        return establishment, granted

    @staticmethod
    @transaction.atomic
    def reset_data(owner: User, scopes: Iterable[str]) -> Dict[str, int]:
        """
        Wipe part of the owner's data.

        Args:
            scopes: any of 'sales' (sales and losses), 'stock' (product
                quantities back to zero), 'team' (all members)

        Returns:
            Number of rows affected per scope
        """
        from apps.inventory.models import Loss, Product
        from apps.orders.models import Sale
        from apps.team.models import TeamMember

        scopes = set(scopes)
        unknown = scopes - set(RESET_SCOPES)
        if unknown or not scopes:
            raise AccountServiceError(_("Unknown reset scope"))

        counts = {}
        if 'sales' in scopes:
            sales_deleted, _detail = Sale.objects.filter(owner=owner).delete()
            losses_deleted, _detail = Loss.objects.filter(owner=owner).delete()
            counts['sales'] = sales_deleted + losses_deleted
        if 'stock' in scopes:
            counts['stock'] = Product.objects.filter(owner=owner).update(quantity=0)
        if 'team' in scopes:
            counts['team'], _detail = TeamMember.objects.filter(owner=owner).delete()

        AuditService.log_event(
            actor_user=owner,
            entity_type='Establishment',
            entity_id=str(owner.pk),
            action='reset_data',
            after_data=counts
        )
        logger.warning("Owner data reset", extra={
            'owner_id': owner.id,
            'scopes': sorted(scopes),
            'event_type': 'data_reset'
        })
        return counts
