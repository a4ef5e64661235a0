"""
Door check-in for NACK POS.

A scan is validated against the agent's assigned event, then the ticket is
read and flagged inside one transaction with the ticket row locked, so two
agents scanning the same ticket at once cannot both admit it.
"""
import json
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.events.models import ScanRecord, ScanResult, Ticket, TicketStatus

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = 'Inconnu'


@dataclass
class CheckInResult:
    state: str
    ticket: Optional[Ticket] = None
    message: str = ''
    ticket_ref: str = ''

    @property
    def customer_name(self) -> str:
        if self.ticket is None:
            return UNKNOWN_CUSTOMER
        return self.ticket.customer_name or 'Client'


class CheckInService:
    """Service class for ticket scanning at the door."""

    @staticmethod
    def parse_payload(raw: str, assigned_event_id=None) -> Optional[Tuple[str, str]]:
        """
        Extract (ticket id, event id) from scanned or typed text.

        A QR code holds {"t": ticket, "e": event}. Typed text that does not
        start with "{" is a bare ticket id for the assigned event.

        Returns:
            The pair, or None when the text is unreadable or incomplete
        """
        text = (raw or '').strip()
        if not text:
            return None

        if not text.startswith('{'):
            if assigned_event_id is None:
                return None
            return text, str(assigned_event_id)

        try:
            payload = json.loads(text)
        except ValueError:
            return None

        if not isinstance(payload, dict):
            return None
        ticket_id = payload.get('t')
        event_id = payload.get('e')
        if not isinstance(ticket_id, str) or not isinstance(event_id, str) or not ticket_id or not event_id:
            return None
        return ticket_id, event_id

    @staticmethod
    def check_in(raw: str, agent) -> CheckInResult:
        """
        Validate a scan for a door agent and record it in the scan history.

        Args:
            raw: QR text or manually typed code
            agent: TeamMember with an assigned event

        Returns:
            CheckInResult with state valid, already_used or invalid
        """
        assigned_event_id = agent.assigned_event_id
        parsed = CheckInService.parse_payload(raw, assigned_event_id)

        if parsed is None:
            result = CheckInResult(ScanResult.INVALID, message="QR non reconnu")
        elif assigned_event_id is None:
            result = CheckInResult(ScanResult.INVALID, message="Aucun événement assigné", ticket_ref=parsed[0])
        elif parsed[1] != str(assigned_event_id):
            result = CheckInResult(
                ScanResult.INVALID,
                message="Billet pour un autre événement",
                ticket_ref=parsed[0]
            )
        else:
            result = CheckInService._admit(parsed[0], str(assigned_event_id), agent.agent_code)

        CheckInService.record_scan(agent, result)

        logger.info(f"Ticket scan {result.state}", extra={
            'agent_code': agent.agent_code,
            'ticket_ref': result.ticket_ref,
            'scan_state': result.state,
            'event_type': 'ticket_scanned'
        })
        return result

    @staticmethod
    @transaction.atomic
    def _admit(ticket_id: str, event_id: str, agent_code: str) -> CheckInResult:
        try:
            ticket = Ticket.objects.select_for_update().get(id=ticket_id)
        except (Ticket.DoesNotExist, ValidationError, ValueError):
            return CheckInResult(ScanResult.INVALID, message=f"Le billet {ticket_id} est invalide", ticket_ref=ticket_id)

        if str(ticket.event_id) != event_id or ticket.status == TicketStatus.CANCELLED:
            return CheckInResult(ScanResult.INVALID, message=f"Le billet {ticket_id} est invalide", ticket_ref=ticket_id)

        if ticket.checked_in:
            return CheckInResult(
                ScanResult.ALREADY_USED,
                ticket=ticket,
                message=f"Le billet {ticket_id} a déjà été validé",
                ticket_ref=ticket_id
            )

        ticket.checked_in = True
        ticket.checked_in_at = timezone.now()
        ticket.checked_in_by = agent_code or ''
        ticket.save(update_fields=['checked_in', 'checked_in_at', 'checked_in_by', 'updated_at'])
        return CheckInResult(
            ScanResult.VALID,
            ticket=ticket,
            message=f"Billet {ticket_id} validé avec succès",
            ticket_ref=ticket_id
        )

    @staticmethod
    def record_scan(agent, result: CheckInResult) -> ScanRecord:
        """Append to the agent's history, keeping only the most recent entries."""
        record = ScanRecord.objects.create(
            agent=agent,
            event_id=agent.assigned_event_id,
            ticket_ref=result.ticket_ref[:64],
            customer_name=result.customer_name,
            result=result.state
        )

        keep = settings.NACK['SCAN_HISTORY_SIZE']
        stale = (
            ScanRecord.objects.filter(agent=agent)
            .exclude(id=record.id)
            .order_by('-created_at')
            .values_list('id', flat=True)[max(keep - 1, 0):]
        )
        ScanRecord.objects.filter(id__in=list(stale)).delete()
        return record

    @staticmethod
    def history(agent):
        return ScanRecord.objects.filter(agent=agent).order_by('-created_at')
