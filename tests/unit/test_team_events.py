"""
Unit tests for team management, events and tickets.
"""
import re
from datetime import time, timedelta
from urllib.parse import unquote

import pytest
from django.utils import timezone

from apps.billing.services.billing_service import BillingService, PaymentRequired
from apps.events.models import Event, Ticket, TicketSource, TicketStatus
from apps.events.services.event_service import WALK_IN_CUSTOMER, EventService, EventServiceError
from apps.events.services.ticket_pdf import TicketPDFService
from apps.orders.models import Sale, SaleSource
from apps.team.models import MemberStatus, TeamMember, TeamRole
from apps.team.services.team_service import TeamService, TeamServiceError


class TestAddMember:
    """Test TeamService.add_member."""

    def test_waiter_needs_credit(self, owner):
        with pytest.raises(PaymentRequired) as exc_info:
            TeamService.add_member(owner, 'Marc', 'Obiang', '+24107000000', TeamRole.WAITER)

        assert exc_info.value.amount == 1000
        assert exc_info.value.reference == 'Ajout membre'
        assert not TeamMember.objects.exists()

    def test_add_waiter_with_credit(self, owner):
        BillingService.add_member_credits(owner, 1)

        member = TeamService.add_member(owner, 'Marc', 'Obiang', '+24107000000', TeamRole.WAITER)

        assert re.match(r'^AGT-[A-Z0-9]{6}$', member.agent_code)
        assert member.status == MemberStatus.ACTIVE
        assert member.dashboard_link == f"/serveur/{member.agent_code}"
        assert BillingService.get_account(owner).member_credits == 0

    def test_event_agent_is_free(self, owner):
        member = TeamService.add_member(owner, 'Paul', 'Nze', '+24107000001', TeamRole.EVENT_AGENT)

        assert member.dashboard_link.startswith('/agent-evenement/')

    def test_required_fields(self, owner):
        with pytest.raises(TeamServiceError):
            TeamService.add_member(owner, 'Marc', '', '+24107000000', TeamRole.WAITER)

    def test_duplicate_phone(self, owner, waiter):
        with pytest.raises(TeamServiceError):
            TeamService.add_member(owner, 'Autre', 'Personne', waiter.phone, TeamRole.EVENT_AGENT)

    def test_duplicate_email_ignores_case(self, owner):
        TeamService.add_member(owner, 'Paul', 'Nze', '+24107000001', TeamRole.EVENT_AGENT, email='paul@bar.ga')

        with pytest.raises(TeamServiceError):
            TeamService.add_member(owner, 'Paul', 'Bis', '+24107000002', TeamRole.EVENT_AGENT, email='PAUL@bar.ga')

    def test_code_collision_draws_again(self, owner, waiter, monkeypatch):
        codes = iter([waiter.agent_code, 'AGT-NEW001'])
        monkeypatch.setattr('apps.team.services.team_service.generate_agent_code', lambda: next(codes))

        member = TeamService.add_member(owner, 'Paul', 'Nze', '+24107000001', TeamRole.EVENT_AGENT)

        assert member.agent_code == 'AGT-NEW001'


class TestMemberLifecycle:

    def test_toggle_disables_code(self, owner, waiter):
        TeamService.toggle_status(owner, waiter.id)

        assert TeamService.resolve_agent(waiter.agent_code) is None

        TeamService.toggle_status(owner, waiter.id)
        assert TeamService.resolve_agent(waiter.agent_code) == waiter

    def test_resolve_normalises_and_touches(self, waiter):
        member = TeamService.resolve_agent(' agt-wait01 ', touch=True)

        assert member == waiter
        waiter.refresh_from_db()
        assert waiter.last_connection is not None

    def test_resolve_unknown(self):
        assert TeamService.resolve_agent('AGT-NOPE00') is None
        assert TeamService.resolve_agent('') is None

    def test_assign_event(self, owner, event, event_agent):
        TeamService.assign_event(owner, event_agent.id, None)
        event_agent.refresh_from_db()
        assert event_agent.assigned_event is None

        TeamService.assign_event(owner, event_agent.id, str(event.id))
        event_agent.refresh_from_db()
        assert event_agent.assigned_event == event

    def test_only_agents_get_events(self, owner, waiter, event):
        with pytest.raises(TeamServiceError):
            TeamService.assign_event(owner, waiter.id, str(event.id))

    def test_remove_member(self, owner, waiter):
        TeamService.remove_member(owner, waiter.id)

        assert not TeamMember.objects.filter(id=waiter.id).exists()

    def test_other_owner_cannot_remove(self, other_owner, waiter):
        with pytest.raises(TeamServiceError):
            TeamService.remove_member(other_owner, waiter.id)


class TestCreateEvent:
    """Test EventService.create_event."""

    def event_data(self):
        return {
            'title': 'Concert Live',
            'date': timezone.localdate() + timedelta(days=10),
            'time': time(20, 30),
            'ticket_price': 3000,
        }

    def test_needs_event_credit(self, owner):
        with pytest.raises(PaymentRequired) as exc_info:
            EventService.create_event(owner, self.event_data())

        assert exc_info.value.amount == 2000
        assert exc_info.value.reference == "Création d'événement"
        assert not Event.objects.exists()

    def test_defaults_and_credit(self, owner):
        BillingService.add_event_credits(owner, 1)

        event = EventService.create_event(owner, self.event_data())

        assert event.location == 'Restaurant NACK'
        assert event.max_capacity == 50
        assert event.currency == 'XAF'
        assert event.tickets_sold == 0
        assert BillingService.get_account(owner).event_credits == 0

    def test_missing_fields_consume_nothing(self, owner):
        BillingService.add_event_credits(owner, 1)
        data = self.event_data()
        del data['ticket_price']

        with pytest.raises(EventServiceError):
            EventService.create_event(owner, data)

        assert BillingService.get_account(owner).event_credits == 1


class TestDoorSales:

    def test_sell_ticket(self, owner, event):
        ticket = EventService.sell_ticket_manually(owner, event.id, agent_code='AGT-DOOR01')

        event.refresh_from_db()
        assert event.tickets_sold == 1
        assert ticket.customer_name == WALK_IN_CUSTOMER
        assert ticket.status == TicketStatus.PAID
        assert ticket.source == TicketSource.DOOR
        sale = Sale.objects.get(event=event)
        assert sale.source == SaleSource.MANUAL
        assert sale.total == 5000

    def test_full_event(self, owner, event, paid_ticket):
        EventService.sell_ticket_manually(owner, event.id)

        with pytest.raises(EventServiceError) as exc_info:
            EventService.sell_ticket_manually(owner, event.id)

        assert 'Complet' in str(exc_info.value)
        event.refresh_from_db()
        assert event.tickets_sold == 3


class TestReservations:

    def test_reserve_gives_whatsapp_link(self, event):
        reservation = EventService.reserve_tickets(event.id, 'Aline', 'aline@test.com', 2)

        assert reservation.ticket.status == TicketStatus.RESERVED
        assert reservation.ticket.total_amount == 10000
        assert reservation.whatsapp_url.startswith('https://wa.me/24177123456?text=')
        text = unquote(reservation.whatsapp_url.split('text=', 1)[1])
        assert 'Soirée Test' in text
        assert 'Total: 10 000 XAF' in text
        event.refresh_from_db()
        assert event.tickets_sold == 0

    def test_reserve_over_capacity(self, event, paid_ticket):
        with pytest.raises(EventServiceError):
            EventService.reserve_tickets(event.id, 'Bruno', 'bruno@test.com', 2)

    def test_reserve_requires_contact(self, event):
        with pytest.raises(EventServiceError):
            EventService.reserve_tickets(event.id, 'Bruno', '', 1)

    def test_confirm_reservation(self, owner, event):
        reservation = EventService.reserve_tickets(event.id, 'Aline', 'aline@test.com', 2)

        ticket = EventService.confirm_reservation(owner, reservation.ticket.id)

        event.refresh_from_db()
        assert ticket.status == TicketStatus.PAID
        assert event.tickets_sold == 2
        assert Sale.objects.get(event=event).source == SaleSource.EVENT

    def test_confirm_twice_fails(self, owner, event):
        reservation = EventService.reserve_tickets(event.id, 'Aline', 'aline@test.com', 1)
        EventService.confirm_reservation(owner, reservation.ticket.id)

        with pytest.raises(EventServiceError):
            EventService.confirm_reservation(owner, reservation.ticket.id)

    def test_participants_skip_cancelled(self, owner, event, paid_ticket):
        Ticket.objects.create(
            owner=owner, event=event, customer_name='Annulé', quantity=1,
            total_amount=5000, status=TicketStatus.CANCELLED
        )

        assert list(EventService.participants(owner, event.id)) == [paid_ticket]


class TestTicketPDF:

    def test_pdf(self, paid_ticket):
        pdf = TicketPDFService.create_ticket_pdf(paid_ticket)

        assert pdf.startswith(b'%PDF')

    def test_payload_is_compact_json(self, paid_ticket):
        payload = TicketPDFService.payload(paid_ticket)

        assert str(paid_ticket.id) in payload
        assert ' ' not in payload
