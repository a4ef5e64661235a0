"""
Unit tests for ticket check-in.
"""
import json
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.events.models import ScanRecord, ScanResult, Ticket, TicketStatus
from apps.events.services.checkin_service import CheckInService


def qr(ticket_id, event_id):
    return json.dumps({'t': str(ticket_id), 'e': str(event_id)})


class TestParsePayload:
    """Test QR payload parsing."""

    def test_json_payload(self):
        assert CheckInService.parse_payload('{"t": "T1", "e": "E1"}') == ('T1', 'E1')

    def test_bare_id_uses_assigned_event(self):
        assert CheckInService.parse_payload('  T1 ', assigned_event_id='E9') == ('T1', 'E9')

    def test_bare_id_without_assigned_event(self):
        assert CheckInService.parse_payload('T1') is None

    @pytest.mark.parametrize('raw', [
        '',
        '{not json',
        '{"t": "T1"}',
        '{"e": "E1"}',
        '{"t": 12, "e": "E1"}',
        '{"t": "", "e": "E1"}',
    ])
    def test_unreadable_payloads(self, raw):
        """Text starting with a brace must be complete JSON."""
        assert CheckInService.parse_payload(raw, assigned_event_id='E1') is None


class TestCheckIn:
    """Test CheckInService.check_in outcomes."""

    def test_first_scan_admits(self, event_agent, paid_ticket):
        result = CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)

        assert result.state == ScanResult.VALID
        assert result.customer_name == 'Aline'
        paid_ticket.refresh_from_db()
        assert paid_ticket.checked_in is True
        assert paid_ticket.checked_in_at is not None
        assert paid_ticket.checked_in_by == 'AGT-DOOR01'

    def test_second_scan_is_already_used(self, event_agent, paid_ticket):
        CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)
        paid_ticket.refresh_from_db()
        first_time = paid_ticket.checked_in_at

        result = CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)

        assert result.state == ScanResult.ALREADY_USED
        assert result.ticket.checked_in_at == first_time

    def test_manual_entry(self, event_agent, paid_ticket):
        result = CheckInService.check_in(str(paid_ticket.id), event_agent)

        assert result.state == ScanResult.VALID

    def test_other_event_is_invalid(self, event_agent, paid_ticket):
        result = CheckInService.check_in(qr(paid_ticket.id, uuid.uuid4()), event_agent)

        assert result.state == ScanResult.INVALID
        paid_ticket.refresh_from_db()
        assert paid_ticket.checked_in is False

    def test_unknown_ticket_is_invalid(self, event_agent, event):
        result = CheckInService.check_in(qr(uuid.uuid4(), event.id), event_agent)

        assert result.state == ScanResult.INVALID
        assert result.customer_name == 'Inconnu'

    def test_malformed_ticket_id_is_invalid(self, event_agent):
        result = CheckInService.check_in('not-a-ticket', event_agent)

        assert result.state == ScanResult.INVALID

    def test_cancelled_ticket_is_invalid(self, event_agent, paid_ticket):
        Ticket.objects.filter(pk=paid_ticket.pk).update(status=TicketStatus.CANCELLED)

        result = CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)

        assert result.state == ScanResult.INVALID

    def test_reserved_ticket_is_admitted(self, owner, event, event_agent):
        ticket = Ticket.objects.create(
            owner=owner, event=event, customer_name='Jean', quantity=1,
            total_amount=5000, status=TicketStatus.RESERVED
        )

        result = CheckInService.check_in(qr(ticket.id, event.id), event_agent)

        assert result.state == ScanResult.VALID

    def test_agent_without_event(self, event_agent, paid_ticket):
        event_agent.assigned_event = None
        event_agent.save()

        result = CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)

        assert result.state == ScanResult.INVALID


class TestScanHistory:
    """Test the per-agent scan history."""

    def test_every_scan_is_recorded(self, event_agent, paid_ticket):
        CheckInService.check_in(qr(paid_ticket.id, paid_ticket.event_id), event_agent)
        CheckInService.check_in('{broken', event_agent)

        results = list(CheckInService.history(event_agent).values_list('result', flat=True))
        assert sorted(results) == sorted([ScanResult.VALID, ScanResult.INVALID])

    def test_history_is_capped(self, settings, event_agent, event):
        settings.NACK = {**settings.NACK, 'SCAN_HISTORY_SIZE': 20}

        for _i in range(23):
            CheckInService.check_in(qr(uuid.uuid4(), event.id), event_agent)

        assert ScanRecord.objects.filter(agent=event_agent).count() == 20

    def test_latest_scan_survives_the_cap(self, settings, event_agent, event):
        settings.NACK = {**settings.NACK, 'SCAN_HISTORY_SIZE': 5}
        for i in range(5):
            ScanRecord.objects.create(agent=event_agent, event=event, ticket_ref=f'old-{i}', result=ScanResult.VALID)
        ScanRecord.objects.filter(agent=event_agent).update(created_at=timezone.now() + timedelta(minutes=1))

        CheckInService.check_in('{broken', event_agent)

        records = ScanRecord.objects.filter(agent=event_agent)
        assert records.count() == 5
        assert records.filter(result=ScanResult.INVALID).exists()
