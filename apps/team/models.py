"""
Team member models for NACK POS.
"""
from django.db import models
from django.utils.translation import gettext_lazy as _
from apps.core.models import OwnedModel


class TeamRole(models.TextChoices):
    """Staff roles, each with its own dashboard."""
    WAITER = 'serveur', _('Waiter')
    CASHIER = 'caissier', _('Cashier')
    EVENT_AGENT = 'agent-evenement', _('Event agent')


class MemberStatus(models.TextChoices):
    ACTIVE = 'active', _('Active')
    INACTIVE = 'inactive', _('Inactive')


DASHBOARD_PATHS = {
    TeamRole.WAITER: '/serveur/{code}',
    TeamRole.CASHIER: '/caisse/{code}',
    TeamRole.EVENT_AGENT: '/agent-evenement/{code}',
}


class TeamMember(OwnedModel):
    """
    A staff member. Members sign in to their dashboard with their agent code;
    the code also links them back to the owner's establishment.
    """
    first_name = models.CharField(
        max_length=100,
        verbose_name=_('First name')
    )

    last_name = models.CharField(
        max_length=100,
        verbose_name=_('Last name')
    )

    phone = models.CharField(
        max_length=20,
        verbose_name=_('Phone number')
    )

    email = models.EmailField(
        blank=True,
        verbose_name=_('Email')
    )

    role = models.CharField(
        max_length=20,
        choices=TeamRole.choices,
        verbose_name=_('Role')
    )

    status = models.CharField(
        max_length=10,
        choices=MemberStatus.choices,
        default=MemberStatus.ACTIVE,
        verbose_name=_('Status')
    )

    agent_code = models.CharField(
        max_length=10,
        unique=True,
        verbose_name=_('Agent code')
    )

    assigned_event = models.ForeignKey(
        'events.Event',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='agents',
        verbose_name=_('Assigned event')
    )

    last_connection = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Last connection')
    )

    class Meta:
        verbose_name = _('Team member')
        verbose_name_plural = _('Team members')
        db_table = 'team_member'
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['owner', 'role']),
            models.Index(fields=['owner', 'phone']),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.agent_code})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self):
        return self.status == MemberStatus.ACTIVE

    @property
    def dashboard_link(self):
        return DASHBOARD_PATHS[self.role].format(code=self.agent_code)

    @property
    def requires_credit(self):
        """Waiter and cashier seats are paid; event agents are included."""
        return self.role in (TeamRole.WAITER, TeamRole.CASHIER)
