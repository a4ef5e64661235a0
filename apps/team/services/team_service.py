"""
Team service for NACK POS.
"""
import logging
import secrets
import string
from typing import Optional

from django.conf import settings
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.billing.services.billing_service import BillingService, PaymentRequired, REFERENCE_MEMBER
from apps.events.models import Event
from apps.team.models import MemberStatus, TeamMember, TeamRole

logger = logging.getLogger(__name__)

AGENT_CODE_PREFIX = 'AGT-'
AGENT_CODE_ALPHABET = string.ascii_uppercase + string.digits
AGENT_CODE_LENGTH = 6


class TeamServiceError(Exception):
    """Base exception for team service errors."""
    pass


def generate_agent_code() -> str:
    return AGENT_CODE_PREFIX + ''.join(secrets.choice(AGENT_CODE_ALPHABET) for _i in range(AGENT_CODE_LENGTH))


class TeamService:
    """Service class for staff management."""

    @staticmethod
    def unique_agent_code() -> str:
        """
        Draw agent codes until one is unused.

        Raises:
            TeamServiceError: no free code after the configured number of attempts
        """
        for _attempt in range(settings.NACK['AGENT_CODE_ATTEMPTS']):
            code = generate_agent_code()
            if not TeamMember.objects.filter(agent_code=code).exists():
                return code
        raise TeamServiceError(_("Impossible de générer un code agent unique"))

    @staticmethod
    @transaction.atomic
    def add_member(
        owner: User,
        first_name: str,
        last_name: str,
        phone: str,
        role: str,
        email: str = ''
    ) -> TeamMember:
        """
        Add a staff member with a fresh agent code.

        Raises:
            TeamServiceError: missing field, unknown role or duplicate phone/email
            PaymentRequired: waiter or cashier without a member credit
        """
        first_name = (first_name or '').strip()
        last_name = (last_name or '').strip()
        phone = (phone or '').strip()
        email = (email or '').strip()

        if not first_name or not last_name or not phone or not role:
            raise TeamServiceError(_("Veuillez remplir tous les champs obligatoires"))
        if role not in TeamRole.values:
            raise TeamServiceError(_("Unknown role"))

        duplicates = Q(phone=phone)
        if email:
            duplicates |= Q(email__iexact=email)
        if TeamMember.objects.filter(owner=owner).filter(duplicates).exists():
            raise TeamServiceError(_("Un membre avec ce téléphone ou email existe déjà."))

        if role in (TeamRole.WAITER, TeamRole.CASHIER):
            if not BillingService.consume_member_credit(owner):
                raise PaymentRequired(
                    _("Crédit membre requis"),
                    amount=settings.NACK['MEMBER_PRICE'],
                    reference=REFERENCE_MEMBER
                )

        member = TeamMember.objects.create(
            owner=owner,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            email=email,
            role=role,
            agent_code=TeamService.unique_agent_code()
        )

        AuditService.log_event(
            actor_user=owner,
            entity_type='TeamMember',
            entity_id=str(member.id),
            action='add_member',
            after_data={'name': member.full_name, 'role': role, 'agent_code': member.agent_code}
        )

        logger.info("Team member added", extra={
            'owner_id': owner.id,
            'agent_code': member.agent_code,
            'role': role,
            'event_type': 'team_member_added'
        })
        return member

    @staticmethod
    @transaction.atomic
    def toggle_status(owner: User, member_id) -> TeamMember:
        member = TeamService.get_member(owner, member_id)
        before = member.status
        member.status = MemberStatus.INACTIVE if member.is_active else MemberStatus.ACTIVE
        member.save(update_fields=['status', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='TeamMember',
            entity_id=str(member.id),
            action='toggle_status',
            before_data={'status': before},
            after_data={'status': member.status}
        )
        return member

    @staticmethod
    @transaction.atomic
    def assign_event(owner: User, member_id, event_id: Optional[str]) -> TeamMember:
        """Point an event agent at the event they scan tickets for (None clears it)."""
        member = TeamService.get_member(owner, member_id)
        if member.role != TeamRole.EVENT_AGENT:
            raise TeamServiceError(_("Only event agents can be assigned to an event"))

        event = None
        if event_id:
            try:
                event = Event.objects.get(id=event_id, owner=owner)
            except (Event.DoesNotExist, ValidationError, ValueError):
                raise TeamServiceError(_("Événement introuvable"))

        member.assigned_event = event
        member.save(update_fields=['assigned_event', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='TeamMember',
            entity_id=str(member.id),
            action='assign_event',
            after_data={'event_id': str(event.id) if event else None}
        )
        return member

    @staticmethod
    @transaction.atomic
    def remove_member(owner: User, member_id) -> None:
        member = TeamService.get_member(owner, member_id)
        AuditService.log_event(
            actor_user=owner,
            entity_type='TeamMember',
            entity_id=str(member.id),
            action='remove_member',
            before_data={'name': member.full_name, 'agent_code': member.agent_code}
        )
        member.delete()

    @staticmethod
    def resolve_agent(agent_code: str, touch: bool = False) -> Optional[TeamMember]:
        """
        Find the active member behind an agent code.
        Returns None for unknown or deactivated codes.
        """
        code = (agent_code or '').strip().upper()
        if not code:
            return None
        member = (
            TeamMember.objects.select_related('owner', 'assigned_event')
            .filter(agent_code=code, status=MemberStatus.ACTIVE)
            .first()
        )
        if member and touch:
            member.last_connection = timezone.now()
            member.save(update_fields=['last_connection'])
        return member

    @staticmethod
    def get_member(owner: User, member_id) -> TeamMember:
        try:
            return TeamMember.objects.get(id=member_id, owner=owner)
        except (TeamMember.DoesNotExist, ValidationError, ValueError):
            raise TeamServiceError(_("Membre introuvable"))
