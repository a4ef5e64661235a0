"""
Event service for NACK POS.
Event creation against prepaid credits, door sales and public reservations.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

from django.core.exceptions import ValidationError
from django.conf import settings
from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import F
from django.utils.translation import gettext_lazy as _

from apps.audit.services.audit_service import AuditService
from apps.billing.services.billing_service import BillingService, PaymentRequired, REFERENCE_EVENT
from apps.events.models import Event, Ticket, TicketSource, TicketStatus
from apps.orders.models import PaymentMethod, Sale, SaleSource

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = 'Vente guichet'


class EventServiceError(Exception):
    """Base exception for event service errors."""
    pass


@dataclass
class Reservation:
    ticket: Ticket
    whatsapp_url: str


def build_whatsapp_url(phone: str, text: str) -> str:
    digits = re.sub(r'\D', '', phone or '')
    return f"https://wa.me/{digits}?text={quote(text)}"


def format_amount(amount: int) -> str:
    return f"{amount:,}".replace(',', ' ')


class EventService:
    """Service class for events and tickets."""

    REQUIRED_FIELDS = ('title', 'date', 'time', 'ticket_price')

    @staticmethod
    @transaction.atomic
    def create_event(owner: User, data: Dict[str, Any]) -> Event:
        """
        Create an event, paid with one event credit.

        Raises:
            EventServiceError: a required field is missing
            PaymentRequired: no event credit left
        """
        missing = [name for name in EventService.REQUIRED_FIELDS if data.get(name) in (None, '')]
        if missing:
            raise EventServiceError(_("Champs requis: %(fields)s") % {'fields': ', '.join(missing)})

        if not BillingService.consume_event_credit(owner):
            raise PaymentRequired(
                _("Crédit événement requis"),
                amount=settings.NACK['EVENT_PRICE'],
                reference=REFERENCE_EVENT
            )

        fields = {key: value for key, value in data.items() if value not in (None, '')}
        event = Event.objects.create(owner=owner, **fields)

        AuditService.log_event(
            actor_user=owner,
            entity_type='Event',
            entity_id=str(event.id),
            action='create_event',
            after_data={'title': event.title, 'date': event.date, 'price': event.ticket_price}
        )
        return event

    @staticmethod
    @transaction.atomic
    def sell_ticket_manually(
        owner: User,
        event_id,
        payment_method: str = PaymentMethod.CASH,
        agent_code: str = ''
    ) -> Ticket:
        """
        Sell one ticket at the door.

        Raises:
            EventServiceError: event missing or full
        """
        event = EventService._locked(owner, event_id)
        if event.is_full:
            raise EventServiceError(_("Complet: plus de places disponibles"))

        Event.objects.filter(pk=event.pk).update(tickets_sold=F('tickets_sold') + 1)
        event.refresh_from_db(fields=['tickets_sold'])

        Sale.objects.create(
            owner=owner,
            total=event.ticket_price,
            items=[{
                'event_id': str(event.id),
                'name': event.title,
                'price': event.ticket_price,
                'quantity': 1,
                'is_event': True,
            }],
            payment_method=payment_method,
            source=SaleSource.MANUAL,
            event=event,
            agent_code=agent_code or ''
        )

        ticket = Ticket.objects.create(
            owner=owner,
            event=event,
            customer_name=WALK_IN_CUSTOMER,
            quantity=1,
            total_amount=event.ticket_price,
            status=TicketStatus.PAID,
            source=TicketSource.DOOR
        )

        logger.info("Door ticket sold", extra={
            'owner_id': owner.id,
            'event_id': str(event.id),
            'ticket_id': str(ticket.id),
            'tickets_sold': event.tickets_sold,
            'event_type': 'ticket_sold'
        })
        return ticket

    @staticmethod
    @transaction.atomic
    def reserve_tickets(
        event_id,
        customer_name: str,
        customer_email: str,
        quantity: int,
        customer_phone: str = ''
    ) -> Reservation:
        """
        Public reservation from the event page.

        The ticket stays reserved until the owner confirms payment; the
        customer is handed a WhatsApp link to arrange it.
        """
        customer_name = (customer_name or '').strip()
        customer_email = (customer_email or '').strip()
        if not customer_name or not customer_email or not quantity or quantity <= 0:
            raise EventServiceError(_("Renseignez le nom, l'email et la quantité"))

        try:
            event = Event.objects.select_for_update().get(id=event_id, is_active=True)
        except (Event.DoesNotExist, ValidationError, ValueError):
            raise EventServiceError(_("Événement introuvable"))

        whatsapp = EventService.owner_whatsapp(event)
        if not whatsapp:
            raise EventServiceError(_("Numéro WhatsApp du gérant manquant"))
        if event.tickets_sold + quantity > event.max_capacity:
            raise EventServiceError(_("Complet: plus de places disponibles"))

        total = event.ticket_price * quantity
        ticket = Ticket.objects.create(
            owner=event.owner,
            event=event,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone or '',
            quantity=quantity,
            total_amount=total,
            status=TicketStatus.RESERVED
        )

        message = (
            f"Nouvelle réservation\n\n"
            f"Événement: {event.title}\n"
            f"Date: {event.date} à {event.time:%H:%M}\n"
            f"Lieu: {event.location}\n"
            f"Client: {customer_name} ({customer_email})\n"
            f"Quantité: {quantity}\n"
            f"Total: {format_amount(total)} {event.currency}\n\n"
            f"Merci de confirmer et d'envoyer les instructions de paiement."
        )

        logger.info("Tickets reserved", extra={
            'event_id': str(event.id),
            'ticket_id': str(ticket.id),
            'quantity': quantity,
            'event_type': 'ticket_reserved'
        })
        return Reservation(ticket=ticket, whatsapp_url=build_whatsapp_url(whatsapp, message))

    @staticmethod
    @transaction.atomic
    def confirm_reservation(owner: User, ticket_id, payment_method: str = PaymentMethod.CASH) -> Ticket:
        """
        Mark a reserved ticket as paid once the customer has settled it.
        Counts its places and records the sale.
        """
        try:
            ticket = Ticket.objects.select_for_update().get(id=ticket_id, owner=owner)
        except (Ticket.DoesNotExist, ValidationError, ValueError):
            raise EventServiceError(_("Billet introuvable"))
        if ticket.status != TicketStatus.RESERVED:
            raise EventServiceError(_("Ce billet n'est pas en attente de paiement"))

        event = EventService._locked(owner, ticket.event_id)
        if event.tickets_sold + ticket.quantity > event.max_capacity:
            raise EventServiceError(_("Complet: plus de places disponibles"))

        Event.objects.filter(pk=event.pk).update(tickets_sold=F('tickets_sold') + ticket.quantity)
        Sale.objects.create(
            owner=owner,
            total=ticket.total_amount,
            items=[{
                'event_id': str(event.id),
                'name': event.title,
                'price': event.ticket_price,
                'quantity': ticket.quantity,
                'is_event': True,
            }],
            payment_method=payment_method,
            source=SaleSource.EVENT,
            event=event
        )

        ticket.status = TicketStatus.PAID
        ticket.save(update_fields=['status', 'updated_at'])

        AuditService.log_event(
            actor_user=owner,
            entity_type='Ticket',
            entity_id=str(ticket.id),
            action='confirm_reservation',
            before_data={'status': TicketStatus.RESERVED},
            after_data={'status': TicketStatus.PAID}
        )
        return ticket

    @staticmethod
    def participants(owner: User, event_id):
        """Tickets of an event, most recent first."""
        event = EventService.get_event(owner, event_id)
        return event.tickets.exclude(status=TicketStatus.CANCELLED).order_by('-created_at')

    @staticmethod
    def get_event(owner: User, event_id) -> Event:
        try:
            return Event.objects.get(id=event_id, owner=owner)
        except (Event.DoesNotExist, ValidationError, ValueError):
            raise EventServiceError(_("Événement introuvable"))

    @staticmethod
    def owner_whatsapp(event: Event) -> str:
        if event.whatsapp_number:
            return event.whatsapp_number
        establishment = getattr(event.owner, 'establishment', None)
        return establishment.whatsapp_number if establishment else ''

    @staticmethod
    def _locked(owner: User, event_id) -> Event:
        try:
            return Event.objects.select_for_update().get(id=event_id, owner=owner)
        except (Event.DoesNotExist, ValidationError, ValueError):
            raise EventServiceError(_("Événement introuvable"))
