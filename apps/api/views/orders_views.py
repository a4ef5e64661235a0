"""
Orders API views for NACK POS.
Waiters send table orders; the cash desk settles them or rings up counter sales.
"""
from django.core.exceptions import ValidationError
from rest_framework import filters, generics, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.api.permissions import (
    IsOwner, IsOwnerOrCashier, IsOwnerOrPOSStaff, IsOwnerOrWaiter, agent_code_of, get_agent
)
from apps.api.serializers import (
    CounterSaleSerializer, CreateOrderSerializer, OrderSerializer, OrderStatusSerializer,
    PaymentSerializer, SaleSerializer
)
from apps.orders.models import Order
from apps.orders.services.notifications import sent_order_notifications
from apps.orders.services.order_service import OrderService, OrderServiceError
from apps.orders.services.sale_service import SaleService
from apps.team.models import TeamRole


class OrderListView(generics.ListAPIView):
    """
    List orders with filtering.
    A waiter only sees their own orders.
    """
    serializer_class = OrderSerializer
    permission_classes = [IsOwnerOrPOSStaff]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['status', 'table_number', 'agent_code']
    ordering_fields = ['order_number', 'created_at', 'total']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = Order.objects.filter(owner=self.request.user)
        agent = get_agent(self.request)
        if agent is not None and agent.role == TeamRole.WAITER:
            queryset = queryset.filter(agent_code=agent.agent_code)
        return queryset


@api_view(['POST'])
@permission_classes([IsOwnerOrWaiter])
def create_order(request):
    """
    Send a table order to the cash desk.
    """
    serializer = CreateOrderSerializer(data=request.data)
    if serializer.is_valid():
        try:
            order = OrderService.create_order(
                owner=request.user,
                table_number=serializer.validated_data['table_number'],
                items=serializer.validated_data['items'],
                agent_code=agent_code_of(request)
            )
            return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)
        except OrderServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsOwnerOrCashier])
def open_orders(request):
    """
    Orders waiting to be paid at the cash desk.
    """
    orders = OrderService.open_orders(request.user)
    return Response(OrderSerializer(orders, many=True).data)


@api_view(['POST'])
@permission_classes([IsOwnerOrPOSStaff])
def update_order_status(request, order_id):
    """
    Move an order between pending, sent and cancelled.
    """
    serializer = OrderStatusSerializer(data=request.data)
    if serializer.is_valid():
        try:
            order = OrderService.update_status(
                owner=request.user,
                order_id=order_id,
                status=serializer.validated_data['status'],
                agent_code=agent_code_of(request)
            )
            return Response(OrderSerializer(order).data)
        except OrderServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsOwnerOrCashier])
def pay_order(request, order_id):
    """
    Settle an order. Paying an order twice is reported, not repeated.
    """
    serializer = PaymentSerializer(data=request.data)
    if serializer.is_valid():
        try:
            result = OrderService.pay_order(
                owner=request.user,
                order_id=order_id,
                payment_method=serializer.validated_data['payment_method'],
                amount_received=serializer.validated_data.get('amount_received'),
                cashier_code=agent_code_of(request)
            )
        except OrderServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            'order': OrderSerializer(result.order).data,
            'sale': SaleSerializer(result.sale).data if result.sale else None,
            'already_paid': result.already_paid,
            'change': result.change,
        })

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsOwnerOrCashier])
def counter_sale(request):
    """
    Ring up a direct sale at the counter.
    """
    serializer = CounterSaleSerializer(data=request.data)
    if serializer.is_valid():
        try:
            sale = SaleService.create_sale(
                owner=request.user,
                items=serializer.validated_data['items'],
                payment_method=serializer.validated_data['payment_method'],
                amount_received=serializer.validated_data.get('amount_received'),
                agent_code=agent_code_of(request)
            )
            return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)
        except OrderServiceError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsOwnerOrCashier])
def daily_total(request):
    """
    Today's takings. A cashier gets their own total.
    """
    code = agent_code_of(request) or request.query_params.get('agent_code') or None
    sales = SaleService.sales_of_day(request.user, cashier_code=code)
    return Response({
        'total': SaleService.daily_sales_total(request.user, cashier_code=code),
        'count': sales.count(),
        'agent_code': code,
    })


@api_view(['GET'])
@permission_classes([IsOwner])
def notifications(request):
    """
    Orders sent to the cash desk today.
    """
    return Response(sent_order_notifications(request.user))


@api_view(['GET'])
@permission_classes([IsOwnerOrPOSStaff])
def order_detail(request, order_id):
    try:
        order = Order.objects.get(id=order_id, owner=request.user)
    except (Order.DoesNotExist, ValidationError):
        return Response({'error': 'Commande introuvable'}, status=status.HTTP_404_NOT_FOUND)
    return Response(OrderSerializer(order).data)
