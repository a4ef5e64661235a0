"""
Custom permissions for NACK POS API.

Owners authenticate with a JWT; staff with their agent code, in which case
`request.auth` is the TeamMember and `request.user` the owner they work for.
"""
from rest_framework import permissions

from apps.team.models import TeamMember, TeamRole


def get_agent(request):
    """TeamMember behind the request, or None for an owner."""
    return request.auth if isinstance(request.auth, TeamMember) else None


def agent_code_of(request) -> str:
    agent = get_agent(request)
    return agent.agent_code if agent else ''


class IsOwner(permissions.BasePermission):
    """
    Permission that only allows the establishment owner.
    """
    message = "Réservé au gérant"

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            get_agent(request) is None
        )


class HasRole(permissions.BasePermission):
    """
    Permission for staff with one of `roles`. The owner is let through
    when `allow_owner` is set.
    """
    roles = ()
    allow_owner = False
    message = "Accès refusé pour ce rôle"

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False

        agent = get_agent(request)
        if agent is None:
            return self.allow_owner
        return agent.role in self.roles


class IsWaiter(HasRole):
    roles = (TeamRole.WAITER,)


class IsCashier(HasRole):
    roles = (TeamRole.CASHIER,)


class IsEventAgent(HasRole):
    roles = (TeamRole.EVENT_AGENT,)


class IsOwnerOrWaiter(HasRole):
    roles = (TeamRole.WAITER,)
    allow_owner = True


class IsOwnerOrCashier(HasRole):
    roles = (TeamRole.CASHIER,)
    allow_owner = True


class IsOwnerOrPOSStaff(HasRole):
    """Owner, waiters and cashiers: everyone working the bar."""
    roles = (TeamRole.WAITER, TeamRole.CASHIER)
    allow_owner = True


class IsOwnerOrStaff(HasRole):
    roles = tuple(TeamRole.values)
    allow_owner = True


# Queued writes get the same checks as the endpoints they replay.
QUEUED_TASK_PERMISSIONS = {
    'add_order': IsOwnerOrWaiter,
    'pay_order': IsOwnerOrCashier,
    'reserve_ticket': IsOwnerOrStaff,
    'add_team_member': IsOwner,
}


def can_queue(request, task_type) -> bool:
    permission = QUEUED_TASK_PERMISSIONS.get(task_type, IsOwner)
    return permission().has_permission(request, None)
