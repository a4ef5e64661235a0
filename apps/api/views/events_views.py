"""
Events API views for NACK POS.
Event management, door sales, public reservations and ticket check-in.
"""
from django.http import HttpResponse
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.api.permissions import IsEventAgent, IsOwner, IsOwnerOrStaff, agent_code_of, get_agent
from apps.api.serializers import (
    EventSerializer, ManualSaleSerializer, PublicEventSerializer, ReserveTicketSerializer,
    ScanRecordSerializer, ScanSerializer, TicketSerializer
)
from apps.api.views.billing_views import payment_required_response
from apps.billing.services.billing_service import PaymentRequired
from apps.events.models import Event, Ticket
from apps.events.services.checkin_service import CheckInService
from apps.events.services.event_service import EventService, EventServiceError
from apps.events.services.ticket_pdf import TicketPDFService
from apps.orders.models import PaymentMethod


class EventListCreateView(generics.ListCreateAPIView):
    """
    List the owner's events; creating one uses an event credit.
    """
    serializer_class = EventSerializer
    permission_classes = [IsOwner]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['is_active', 'date']
    search_fields = ['title', 'location']
    ordering_fields = ['date', 'created_at', 'tickets_sold']
    ordering = ['date', 'time']

    def get_queryset(self):
        return Event.objects.filter(owner=self.request.user)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            event = EventService.create_event(request.user, dict(serializer.validated_data))
        except PaymentRequired as e:
            return payment_required_response(e)
        except EventServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(self.get_serializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    Retrieve, update or delete an event.
    """
    serializer_class = EventSerializer
    permission_classes = [IsOwner]

    def get_queryset(self):
        return Event.objects.filter(owner=self.request.user)


@api_view(['POST'])
@permission_classes([IsOwnerOrStaff])
def sell_ticket(request, event_id):
    """
    Sell one ticket at the door.
    """
    serializer = ManualSaleSerializer(data=request.data)
    if serializer.is_valid():
        try:
            ticket = EventService.sell_ticket_manually(
                owner=request.user,
                event_id=event_id,
                payment_method=serializer.validated_data['payment_method'],
                agent_code=agent_code_of(request)
            )
            return Response(TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)
        except EventServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsOwnerOrStaff])
def participants(request, event_id):
    """
    Tickets of an event with their check-in state.
    """
    try:
        tickets = EventService.participants(request.user, event_id)
    except EventServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        'count': tickets.count(),
        'checked_in': tickets.filter(checked_in=True).count(),
        'tickets': TicketSerializer(tickets, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsOwnerOrStaff])
def ticket_pdf(request, ticket_id):
    """
    Printable ticket with its QR code.
    """
    try:
        ticket = Ticket.objects.select_related('event').get(id=ticket_id, owner=request.user)
    except (Ticket.DoesNotExist, ValueError):
        return Response({'error': 'Billet introuvable'}, status=status.HTTP_404_NOT_FOUND)

    pdf_content = TicketPDFService.create_ticket_pdf(ticket)

    response = HttpResponse(pdf_content, content_type='application/pdf')
    filename = f"billet_{ticket.id}.pdf"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    response['Content-Length'] = len(pdf_content)
    return response


@api_view(['POST'])
@permission_classes([IsOwner])
def confirm_reservation(request, ticket_id):
    """
    Mark a reserved ticket as paid.
    """
    serializer = ManualSaleSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        ticket = EventService.confirm_reservation(
            owner=request.user,
            ticket_id=ticket_id,
            payment_method=serializer.validated_data.get('payment_method', PaymentMethod.CASH)
        )
    except EventServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(TicketSerializer(ticket).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def public_event(request, event_id):
    """
    Public event page data.
    """
    try:
        event = Event.objects.get(id=event_id, is_active=True)
    except (Event.DoesNotExist, ValueError):
        return Response({'error': 'Événement introuvable'}, status=status.HTTP_404_NOT_FOUND)

    return Response(PublicEventSerializer(event).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def public_reserve(request, event_id):
    """
    Reserve tickets from the public page.
    Returns the WhatsApp link that sends the request to the owner.
    """
    serializer = ReserveTicketSerializer(data=request.data)
    if serializer.is_valid():
        try:
            reservation = EventService.reserve_tickets(event_id=event_id, **serializer.validated_data)
        except EventServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            'ticket_id': str(reservation.ticket.id),
            'total_amount': reservation.ticket.total_amount,
            'whatsapp_url': reservation.whatsapp_url,
        }, status=status.HTTP_201_CREATED)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsEventAgent])
def agent_event(request):
    """
    The event the door agent is assigned to, with its attendance.
    """
    agent = get_agent(request)
    event = agent.assigned_event
    if event is None:
        return Response({'event': None, 'checked_in': 0})

    return Response({
        'event': EventSerializer(event).data,
        'checked_in': event.tickets.filter(checked_in=True).count(),
    })


@api_view(['POST'])
@permission_classes([IsEventAgent])
def check_in(request):
    """
    Validate a scanned QR code or a typed ticket id.
    Business outcomes are always a 200 with a result state.
    """
    serializer = ScanSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = CheckInService.check_in(serializer.validated_data['payload'], get_agent(request))
    return Response({
        'result': result.state,
        'message': result.message,
        'ticket_id': result.ticket_ref,
        'customer_name': result.customer_name,
        'quantity': result.ticket.quantity if result.ticket else None,
        'checked_in_at': result.ticket.checked_in_at if result.ticket else None,
    })


@api_view(['GET'])
@permission_classes([IsEventAgent])
def scan_history(request):
    """
    The agent's most recent scans.
    """
    records = CheckInService.history(get_agent(request))
    return Response(ScanRecordSerializer(records, many=True).data)
